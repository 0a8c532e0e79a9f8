"""
Протоколы (интерфейсы) обмена ключами.

- KeyExchangeProtocol — единый контракт для DHE, ECDHE, X25519, X448
- PreMasterSecretProtocol — stateful сессии, выдающие pre-master secret
  (RSA key transport, TLS 1.2 ECDHE, TLS 1.3 key share)

Модуль использует typing.Protocol для определения контрактов, что обеспечивает
structural subtyping без явного наследования. Все Protocol классы помечены
@runtime_checkable для поддержки isinstance() проверок.

Example:
    >>> from src.tls_kex.algorithms.modern_curve import X25519Exchange
    >>> isinstance(X25519Exchange(), KeyExchangeProtocol)
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from src.tls_kex.config import KeyPairOptions, SecretOptions
    from src.tls_kex.core.models import KeyPair

KeyPairOptionsLike = Union["KeyPairOptions", Mapping[str, Any], None]
SecretOptionsLike = Union["SecretOptions", Mapping[str, Any], None]


@runtime_checkable
class KeyExchangeProtocol(Protocol):
    """
    Протокол для обмена ключами.

    Алгоритмы:
        - dhe: finite-field Diffie-Hellman (RFC 3526 MODP groups)
        - ecdhe: ECDH на именованных кривых (NIST P-256/384/521)
        - x25519: RFC 7748, fixed-size ключи
        - x448: placeholder (UnsupportedOperationError)

    Attributes:
        name: Имя алгоритма (например, "ecdhe")

    Validation Rules:
        - Несовпадение параметров отклоняется ДО вычисления секрета
        - options: только известные ключи (group, curve, hash)

    Example:
        >>> kex = get_kex_algorithm("ecdhe")
        >>> alice = kex.generate_keypair({"curve": "secp256r1"})
        >>> bob = kex.generate_keypair({"curve": "secp256r1"})
        >>> kex.compute_shared_secret(alice.private_key, bob.public_key) == \\
        ...     kex.compute_shared_secret(bob.private_key, alice.public_key)
        True
    """

    name: str

    def generate_keypair(self, options: KeyPairOptionsLike = None) -> "KeyPair":
        """
        Сгенерировать ephemeral пару ключей.

        Args:
            options: KeyPairOptions или mapping {"group": ..., "curve": ...}

        Returns:
            KeyPair (владелец — вызывающая сторона)

        Raises:
            InvalidParameterError: Неизвестный ключ в options
            InvalidCurveError: Неизвестная кривая (ECDHE)
            KeyGenerationError: Провайдер не смог сгенерировать ключ
            UnsupportedOperationError: Алгоритм недоступен
        """
        ...

    def compute_shared_secret(
        self,
        private_key: bytes,
        peer_public_key: bytes,
        options: SecretOptionsLike = None,
    ) -> bytes:
        """
        Вычислить общий секрет.

        Args:
            private_key: Локальный приватный ключ
            peer_public_key: Публичный ключ собеседника
            options: SecretOptions или mapping {"hash": ...}

        Returns:
            Общий секрет

        Raises:
            InvalidKeyError: Ключ не загружается / неверная длина
            InvalidCurveError: Кривые ключей не совпадают
            KeyExchangeFailedError: Провайдер отклонил комбинацию
            UnsupportedOperationError: Алгоритм / derive недоступны
        """
        ...


@runtime_checkable
class PreMasterSecretProtocol(Protocol):
    """
    Протокол stateful сессии обмена ключами.

    Реализуется RSAKeyTransport, ECDHEKeyExchange (TLS 1.2) и
    TLS13KeyExchange.
    """

    def get_pre_master_secret(self) -> bytes:
        """
        Получить pre-master secret.

        Returns:
            Pre-master secret или b"" если он ещё не вычислен
        """
        ...


__all__ = [
    "KeyExchangeProtocol",
    "PreMasterSecretProtocol",
    "KeyPairOptionsLike",
    "SecretOptionsLike",
]
