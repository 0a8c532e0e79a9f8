"""
Модели данных обмена ключами.

Определяет:
- GroupKind — тип группы (finite field / elliptic curve / modern curve)
- GroupParameter — immutable доменные параметры группы или кривой
- KeyPair — immutable пара ключей, возвращаемая generate_keypair()

Все модели — request-scoped value objects: не разделяются между
сессиями и не изменяются после создания.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

MAX_WIRE_GROUP_ID = 0xFFFF


class GroupKind(str, Enum):
    """
    Тип доменных параметров.

    Наследует str для корректной JSON сериализации.

    Example:
        >>> GroupKind.FINITE_FIELD.value
        'finite_field'
    """

    FINITE_FIELD = "finite_field"
    ELLIPTIC_CURVE = "elliptic_curve"
    MODERN_CURVE = "modern_curve"

    def label(self) -> str:
        """Человекочитаемое название типа."""
        labels = {
            GroupKind.FINITE_FIELD: "Finite-field Diffie-Hellman",
            GroupKind.ELLIPTIC_CURVE: "Named elliptic curve",
            GroupKind.MODERN_CURVE: "Fixed-size modern curve",
        }
        return labels[self]


@dataclass(frozen=True)
class GroupParameter:
    """
    Доменные параметры одной группы / кривой.

    Attributes:
        identifier: Уникальный ключ в реестре ("ffdhe2048", "secp256r1", "x25519")
        kind: Тип группы
        prime_hex: Простой модуль в hex (только FINITE_FIELD)
        generator: Генератор (только FINITE_FIELD)
        bits: Битовая длина группы
        curve_name: Имя кривой у провайдера (ELLIPTIC_CURVE / MODERN_CURVE)
        key_size: Фиксированная длина ключа в байтах (кривые)
        wire_id: 16-битный TLS 1.3 NamedGroup ID (если есть)

    Example:
        >>> param = GroupParameter(
        ...     identifier="x25519",
        ...     kind=GroupKind.MODERN_CURVE,
        ...     bits=255,
        ...     curve_name="X25519",
        ...     key_size=32,
        ...     wire_id=29,
        ... )
        >>> param.is_tls13
        True
    """

    identifier: str
    kind: GroupKind
    prime_hex: Optional[str] = field(default=None, repr=False)
    generator: Optional[int] = None
    bits: Optional[int] = None
    curve_name: Optional[str] = None
    key_size: Optional[int] = None
    wire_id: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not self.identifier or not self.identifier.strip():
            raise ValueError("identifier must be a non-empty string")

        if self.kind is GroupKind.FINITE_FIELD:
            if not self.prime_hex:
                raise ValueError(f"{self.identifier}: finite-field group needs prime_hex")
            if self.generator is None or self.generator < 2:
                raise ValueError(f"{self.identifier}: generator must be >= 2")
        else:
            if not self.curve_name:
                raise ValueError(f"{self.identifier}: curve group needs curve_name")
            if self.key_size is None or self.key_size <= 0:
                raise ValueError(f"{self.identifier}: key_size must be positive")

        if self.wire_id is not None and not 0 <= self.wire_id <= MAX_WIRE_GROUP_ID:
            raise ValueError(
                f"{self.identifier}: wire_id must be in 0..{MAX_WIRE_GROUP_ID}, "
                f"got {self.wire_id}"
            )

    @property
    def is_tls13(self) -> bool:
        """True если группа имеет TLS 1.3 wire ID."""
        return self.wire_id is not None

    @property
    def is_modern_curve(self) -> bool:
        return self.kind is GroupKind.MODERN_CURVE

    def to_dict(self) -> dict[str, Any]:
        """Сериализация в словарь (без простого модуля)."""
        return {
            "identifier": self.identifier,
            "kind": self.kind.value,
            "generator": self.generator,
            "bits": self.bits,
            "curve_name": self.curve_name,
            "key_size": self.key_size,
            "wire_id": self.wire_id,
        }


@dataclass(frozen=True)
class KeyPair:
    """
    Пара ключей, созданная generate_keypair().

    Владелец — вызывающая сторона. После создания не изменяется.

    Attributes:
        private_key: Приватный ключ в нативной кодировке алгоритма
        public_key: Публичный ключ в нативной кодировке алгоритма
        group: Ссылка на параметры группы / кривой (не владеет ими)
        metadata: Алгоритм-специфичные данные (read-only), например
            {"group": "ffdhe2048", "bits": 2048}

    Security Note:
        private_key исключён из repr() — безопасно для логов.
    """

    private_key: bytes = field(repr=False)
    public_key: bytes
    group: Optional[GroupParameter] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.private_key, bytes):
            raise TypeError(
                f"private_key must be bytes, got {type(self.private_key).__name__}"
            )
        if not isinstance(self.public_key, bytes):
            raise TypeError(
                f"public_key must be bytes, got {type(self.public_key).__name__}"
            )
        # Read-only view over a private copy
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def group_name(self) -> Optional[str]:
        """Имя фактически использованной группы / кривой."""
        return self.group.identifier if self.group is not None else None

    @property
    def bits(self) -> Optional[int]:
        """Битовая длина фактически использованной группы."""
        value = self.metadata.get("bits")
        if value is not None:
            return int(value)
        return self.group.bits if self.group is not None else None


__all__ = [
    "MAX_WIRE_GROUP_ID",
    "GroupKind",
    "GroupParameter",
    "KeyPair",
]
