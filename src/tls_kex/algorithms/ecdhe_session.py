"""
TLS 1.2 ECDHE key exchange (RFC 8422), сторона клиента.

Порядок работы:
    1. set_ec_parameters(curve, server_public_key) — из ServerKeyExchange
    2. generate_client_key_pair() — публичная точка для ClientKeyExchange
    3. compute_pre_master_secret() — сырой ECDH (x-координата / X25519 output)

Кодировки:
    - secp256r1 / secp384r1 / secp521r1: X9.62 uncompressed point
    - x25519: 32 байта
"""

from __future__ import annotations

import logging
from typing import Final, FrozenSet, Optional

from src.tls_kex.algorithms import ec_points
from src.tls_kex.algorithms.base import _ensure_bytes
from src.tls_kex.algorithms.modern_curve import X25519Exchange
from src.tls_kex.core.exceptions import InvalidCurveError, InvalidParameterError
from src.tls_kex.core.registry import GroupRegistry

logger = logging.getLogger(__name__)


SESSION_CURVES: Final[FrozenSet[str]] = frozenset(
    {"secp256r1", "secp384r1", "secp521r1", "x25519"}
)


class ECDHEKeyExchange:
    """
    Stateful сессия TLS 1.2 ECDHE.

    Один экземпляр обслуживает один handshake.

    Example:
        >>> session = ECDHEKeyExchange()
        >>> session.set_ec_parameters("secp256r1", server_point)
        >>> client_point = session.generate_client_key_pair()
        >>> pre_master = session.compute_pre_master_secret()
    """

    name = "ecdhe-tls12"

    def __init__(self, registry: Optional[GroupRegistry] = None) -> None:
        self._registry = registry if registry is not None else GroupRegistry.get_instance()
        self._curve = ""
        self._server_public_key = b""
        self._client_private_key = b""
        self._client_public_key = b""
        self._pre_master_secret = b""
        self._x25519 = X25519Exchange(self._registry)
        self._logger = logger.getChild("session")

    def set_ec_parameters(self, curve: str, server_public_key: bytes) -> None:
        """
        Задать кривую и публичный ключ сервера.

        Raises:
            InvalidCurveError: Кривая не поддерживается
            TypeError: Если server_public_key не является bytes
        """
        canonical = self._registry.canonical_name(curve)
        if canonical not in SESSION_CURVES:
            raise InvalidCurveError(
                f"Unsupported elliptic curve: {curve}",
                algorithm=self.name,
                requested=str(curve),
            )
        _ensure_bytes(server_public_key, "server_public_key")

        self._curve = canonical
        self._server_public_key = server_public_key

    def get_curve(self) -> str:
        return self._curve

    def get_server_public_key(self) -> bytes:
        return self._server_public_key

    def generate_client_key_pair(self) -> bytes:
        """
        Сгенерировать клиентскую пару ключей на выбранной кривой.

        Returns:
            Публичный ключ клиента в wire-кодировке

        Raises:
            InvalidParameterError: Кривая или ключ сервера не заданы
            KeyGenerationError: Провайдер не смог создать ключ
        """
        if not self._curve or not self._server_public_key:
            raise InvalidParameterError("EC parameters not set", algorithm=self.name)

        if self._curve == "x25519":
            key_pair = self._x25519.generate_keypair()
            self._client_private_key = key_pair.private_key
            self._client_public_key = key_pair.public_key
        else:
            self._client_private_key, self._client_public_key = (
                ec_points.generate_point_key(self._curve, algorithm=self.name)
            )

        return self._client_public_key

    def compute_pre_master_secret(self) -> bytes:
        """
        Вычислить pre-master secret (сырой ECDH, без хеширования).

        Raises:
            InvalidParameterError: Нет клиентского ключа или ключа сервера
            InvalidKeyError: Точка сервера не декодируется
            KeyExchangeFailedError: Провайдер отклонил комбинацию
        """
        if not self._client_private_key or not self._server_public_key:
            raise InvalidParameterError(
                "Missing parameters for computing pre-master secret",
                algorithm=self.name,
            )

        if self._curve == "x25519":
            secret = self._x25519.compute_shared_secret(
                self._client_private_key, self._server_public_key
            )
        else:
            secret = ec_points.derive_from_point(
                self._curve,
                self._client_private_key,
                self._server_public_key,
                algorithm=self.name,
            )

        self._pre_master_secret = secret
        self._logger.debug(f"Computed {len(secret)}B pre-master secret ({self._curve})")
        return secret

    def get_pre_master_secret(self) -> bytes:
        """Pre-master secret или b"" если он ещё не вычислен."""
        return self._pre_master_secret

    def get_client_public_key(self) -> bytes:
        return self._client_public_key

    def __repr__(self) -> str:
        return f"ECDHEKeyExchange(curve={self._curve!r})"


__all__ = [
    "SESSION_CURVES",
    "ECDHEKeyExchange",
]
