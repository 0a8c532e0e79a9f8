"""
Реестр доменных параметров групп и кривых.

Immutable таблица, заполняемая один раз при первом обращении:
- Finite-field группы (MODP, RFC 3526): ffdhe2048, ffdhe3072, ffdhe4096 (g = 2)
- Именованные кривые NIST: secp256r1, secp384r1, secp521r1
- Modern curves (RFC 7748): x25519, x448

Для TLS 1.3 группы содержат 16-битный NamedGroup ID (RFC 8446 §4.2.7):
    secp256r1 → 23, secp384r1 → 24, secp521r1 → 25, x25519 → 29, x448 → 30

API вставки / изменения после инициализации НЕ предоставляется.

Простые модули хранятся как hex-текст и конвертируются в binary
лениво, один раз на группу. Конвертация — чистая функция имени группы,
первая запись сериализуется одним Lock.

Example:
    >>> from src.tls_kex.core.registry import GroupRegistry
    >>> registry = GroupRegistry.get_instance()
    >>> registry.resolve("ffdhe2048").bits
    2048
    >>> registry.resolve("unknown") is None
    True
    >>> registry.by_wire_id(29).identifier
    'x25519'

Thread Safety:
    get_instance() — double-checked locking.
    Кеш простых чисел — один Lock на первую запись.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from src.tls_kex.core.exceptions import InvalidCurveError
from src.tls_kex.core.models import GroupKind, GroupParameter

logger = logging.getLogger(__name__)


# ==============================================================================
# CONSTANTS
# ==============================================================================

# RFC 3526 §3, 2048-bit MODP Group (id 14)
_MODP_2048_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD129024E088A67CC74"
    "020BBEA63B139B22514A08798E3404DDEF9519B3CD3A431B302B0A6DF25F1437"
    "4FE1356D6D51C245E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3DC2007CB8A163BF05"
    "98DA48361C55D39A69163FA8FD24CF5F83655D23DCA3AD961C62F356208552BB"
    "9ED529077096966D670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9DE2BCBF695581718"
    "3995497CEA956AE515D2261898FA051015728E5A8AACAA68FFFFFFFFFFFFFFFF"
)

# RFC 3526 §4, 3072-bit MODP Group (id 15)
_MODP_3072_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD129024E088A67CC74"
    "020BBEA63B139B22514A08798E3404DDEF9519B3CD3A431B302B0A6DF25F1437"
    "4FE1356D6D51C245E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3DC2007CB8A163BF05"
    "98DA48361C55D39A69163FA8FD24CF5F83655D23DCA3AD961C62F356208552BB"
    "9ED529077096966D670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9DE2BCBF695581718"
    "3995497CEA956AE515D2261898FA051015728E5A8AAAC42DAD33170D04507A33"
    "A85521ABDF1CBA64ECFB850458DBEF0A8AEA71575D060C7DB3970F85A6E1E4C7"
    "ABF5AE8CDB0933D71E8C94E04A25619DCEE3D2261AD2EE6BF12FFA06D98A0864"
    "D87602733EC86A64521F2B18177B200CBBE117577A615D6C770988C0BAD946E2"
    "08E24FA074E5AB3143DB5BFCE0FD108E4B82D120A93AD2CAFFFFFFFFFFFFFFFF"
)

# RFC 3526 §5, 4096-bit MODP Group (id 16)
_MODP_4096_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD129024E088A67CC74"
    "020BBEA63B139B22514A08798E3404DDEF9519B3CD3A431B302B0A6DF25F1437"
    "4FE1356D6D51C245E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3DC2007CB8A163BF05"
    "98DA48361C55D39A69163FA8FD24CF5F83655D23DCA3AD961C62F356208552BB"
    "9ED529077096966D670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9DE2BCBF695581718"
    "3995497CEA956AE515D2261898FA051015728E5A8AAAC42DAD33170D04507A33"
    "A85521ABDF1CBA64ECFB850458DBEF0A8AEA71575D060C7DB3970F85A6E1E4C7"
    "ABF5AE8CDB0933D71E8C94E04A25619DCEE3D2261AD2EE6BF12FFA06D98A0864"
    "D87602733EC86A64521F2B18177B200CBBE117577A615D6C770988C0BAD946E2"
    "08E24FA074E5AB3143DB5BFCE0FD108E4B82D120A92108011A723C12A787E6D7"
    "88719A10BDBA5B2699C327186AF4E23C1A946834B6150BDA2583E9CA2AD44CE8"
    "DBBBC2DB04DE8EF92E8EFC141FBECAA6287C59474E6BC05D99B2964FA090C3A2"
    "233BA186515BE7ED1F612970CEE2D7AFB81BDD762170481CD0069127D5B05AA9"
    "93B4EA988D8FDDC186FFB7DC90A6C08F4DF435C934063199FFFFFFFFFFFFFFFF"
)

_STANDARD_GROUPS: tuple[GroupParameter, ...] = (
    # Finite-field (DHE)
    GroupParameter(
        identifier="ffdhe2048",
        kind=GroupKind.FINITE_FIELD,
        prime_hex=_MODP_2048_HEX,
        generator=2,
        bits=2048,
    ),
    GroupParameter(
        identifier="ffdhe3072",
        kind=GroupKind.FINITE_FIELD,
        prime_hex=_MODP_3072_HEX,
        generator=2,
        bits=3072,
    ),
    GroupParameter(
        identifier="ffdhe4096",
        kind=GroupKind.FINITE_FIELD,
        prime_hex=_MODP_4096_HEX,
        generator=2,
        bits=4096,
    ),
    # NIST named curves (ECDHE); key_size = field element length
    GroupParameter(
        identifier="secp256r1",
        kind=GroupKind.ELLIPTIC_CURVE,
        bits=256,
        curve_name="secp256r1",
        key_size=32,
        wire_id=23,
    ),
    GroupParameter(
        identifier="secp384r1",
        kind=GroupKind.ELLIPTIC_CURVE,
        bits=384,
        curve_name="secp384r1",
        key_size=48,
        wire_id=24,
    ),
    GroupParameter(
        identifier="secp521r1",
        kind=GroupKind.ELLIPTIC_CURVE,
        bits=521,
        curve_name="secp521r1",
        key_size=66,
        wire_id=25,
    ),
    # RFC 7748 modern curves
    GroupParameter(
        identifier="x25519",
        kind=GroupKind.MODERN_CURVE,
        bits=255,
        curve_name="X25519",
        key_size=32,
        wire_id=29,
    ),
    GroupParameter(
        identifier="x448",
        kind=GroupKind.MODERN_CURVE,
        bits=448,
        curve_name="X448",
        key_size=56,
        wire_id=30,
    ),
)

# Alternative spellings (OpenSSL / NIST names), matched case-insensitively
_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "prime256v1": "secp256r1",
        "p-256": "secp256r1",
        "p256": "secp256r1",
        "p-384": "secp384r1",
        "p384": "secp384r1",
        "p-521": "secp521r1",
        "p521": "secp521r1",
    }
)


# ==============================================================================
# MAIN CLASS: GROUP REGISTRY
# ==============================================================================


class GroupRegistry:
    """
    Immutable реестр групп / кривых.

    Singleton: используйте get_instance(). Таблица фиксирована и
    публикуется целиком в конструкторе.

    Attributes:
        _instance: Singleton instance
        _lock: Lock для double-checked инициализации
        _groups: Read-only mapping {identifier -> GroupParameter}
        _by_wire_id: Read-only mapping {wire_id -> GroupParameter}
        _prime_cache: Ленивый кеш {identifier -> binary prime}
    """

    _instance: Optional[GroupRegistry] = None
    _lock: threading.Lock = threading.Lock()

    def __init__(self, groups: tuple[GroupParameter, ...] = _STANDARD_GROUPS) -> None:
        """
        Построить реестр из фиксированной таблицы.

        Args:
            groups: Таблица параметров (по умолчанию — стандартная)

        Raises:
            ValueError: Если идентификатор или wire ID повторяется
        """
        table: Dict[str, GroupParameter] = {}
        by_wire_id: Dict[int, GroupParameter] = {}

        for group in groups:
            if group.identifier in table:
                raise ValueError(f"Duplicate group identifier: {group.identifier}")
            table[group.identifier] = group

            if group.wire_id is not None:
                if group.wire_id in by_wire_id:
                    raise ValueError(f"Duplicate wire group ID: {group.wire_id}")
                by_wire_id[group.wire_id] = group

        self._groups: Mapping[str, GroupParameter] = MappingProxyType(table)
        self._by_wire_id: Mapping[int, GroupParameter] = MappingProxyType(by_wire_id)
        self._prime_cache: Dict[str, bytes] = {}
        self._prime_lock = threading.Lock()

        logger.info(f"GroupRegistry initialized with {len(table)} groups")

    @classmethod
    def get_instance(cls) -> GroupRegistry:
        """
        Получить process-wide экземпляр реестра.

        Thread Safety:
            Thread-safe double-checked locking
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """
        Сбросить singleton (для тестов).

        Warning:
            Экземпляры, полученные ранее, продолжают работать со своей копией.
        """
        with cls._lock:
            cls._instance = None

    # --------------------------------------------------------------------------
    # Lookup
    # --------------------------------------------------------------------------

    def canonical_name(self, identifier: str) -> Optional[str]:
        """
        Привести имя (или alias) к каноническому идентификатору.

        Returns:
            Канонический идентификатор или None если имя неизвестно
        """
        if not isinstance(identifier, str):
            return None
        if identifier in self._groups:
            return identifier

        lowered = identifier.strip().lower()
        if lowered in self._groups:
            return lowered
        return _ALIASES.get(lowered)

    def resolve(self, identifier: str) -> Optional[GroupParameter]:
        """
        Найти параметры группы по имени.

        Args:
            identifier: Имя группы или alias ("secp256r1", "prime256v1", ...)

        Returns:
            GroupParameter или None (NotFound)
        """
        name = self.canonical_name(identifier)
        return self._groups[name] if name is not None else None

    def require(self, identifier: str, *, algorithm: Optional[str] = None) -> GroupParameter:
        """
        Найти параметры группы или выбросить InvalidCurveError.

        Raises:
            InvalidCurveError: Если группа неизвестна
        """
        group = self.resolve(identifier)
        if group is None:
            raise InvalidCurveError(
                f"Unknown group: {identifier}",
                algorithm=algorithm,
                requested=str(identifier),
            )
        return group

    def by_wire_id(self, wire_id: int) -> Optional[GroupParameter]:
        """Найти TLS 1.3 группу по 16-битному NamedGroup ID."""
        return self._by_wire_id.get(wire_id)

    def names(self, kind: Optional[GroupKind] = None) -> List[str]:
        """
        Список идентификаторов (в порядке таблицы).

        Args:
            kind: Фильтр по типу группы (опционально)
        """
        return [
            name
            for name, group in self._groups.items()
            if kind is None or group.kind is kind
        ]

    def tls13_groups(self) -> List[GroupParameter]:
        """Группы, имеющие TLS 1.3 wire ID, отсортированные по ID."""
        return [self._by_wire_id[wire_id] for wire_id in sorted(self._by_wire_id)]

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.canonical_name(identifier) is not None

    def __len__(self) -> int:
        return len(self._groups)

    # --------------------------------------------------------------------------
    # Finite-field prime cache
    # --------------------------------------------------------------------------

    def prime_bytes(self, identifier: str) -> bytes:
        """
        Простой модуль finite-field группы в binary (big-endian).

        Конвертация hex → bytes выполняется один раз на группу.

        Raises:
            InvalidCurveError: Если группа неизвестна
            ValueError: Если группа не finite-field
        """
        group = self.require(identifier)
        if group.kind is not GroupKind.FINITE_FIELD or group.prime_hex is None:
            raise ValueError(f"{group.identifier} is not a finite-field group")

        cached = self._prime_cache.get(group.identifier)
        if cached is not None:
            return cached

        with self._prime_lock:
            cached = self._prime_cache.get(group.identifier)
            if cached is None:
                hex_text = group.prime_hex
                if len(hex_text) % 2:
                    hex_text = "0" + hex_text
                cached = bytes.fromhex(hex_text)
                self._prime_cache[group.identifier] = cached
                logger.debug(
                    f"Cached binary prime for {group.identifier} ({len(cached)} bytes)"
                )
        return cached

    def prime_int(self, identifier: str) -> int:
        """Простой модуль finite-field группы как int."""
        return int.from_bytes(self.prime_bytes(identifier), "big")


__all__ = [
    "GroupRegistry",
]
