"""
RSA key transport (TLS 1.2, RFC 5246 §7.4.7.1).

Это НЕ обмен Diffie-Hellman: клиент генерирует pre-master secret
фиксированного формата и шифрует его публичным ключом сервера.

    pre_master_secret = client_version (uint16, big-endian) || random[46]

Шифрование / расшифровка: RSAES-PKCS1-v1_5.

Порядок проверок encrypt_pre_master_secret():
    1. pre-master secret сгенерирован
    2. публичный ключ сервера задан
"""

from __future__ import annotations

import logging
import secrets
import struct
from typing import Final

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from src.tls_kex.algorithms.base import _ensure_bytes
from src.tls_kex.core.exceptions import (
    InvalidKeyError,
    InvalidParameterError,
    KeyGenerationError,
)

logger = logging.getLogger(__name__)


PRE_MASTER_SECRET_SIZE: Final[int] = 48  # bytes
PRE_MASTER_RANDOM_SIZE: Final[int] = 46  # bytes

_PEM_MARKER = b"-----BEGIN"


def _load_public_key(data: bytes) -> rsa.RSAPublicKey:
    if data.lstrip().startswith(_PEM_MARKER):
        key = serialization.load_pem_public_key(data)
    else:
        key = serialization.load_der_public_key(data)
    if not isinstance(key, rsa.RSAPublicKey):
        raise TypeError(f"expected RSA public key, got {type(key).__name__}")
    return key


def _load_private_key(data: bytes) -> rsa.RSAPrivateKey:
    if data.lstrip().startswith(_PEM_MARKER):
        key = serialization.load_pem_private_key(data, password=None)
    else:
        key = serialization.load_der_private_key(data, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise TypeError(f"expected RSA private key, got {type(key).__name__}")
    return key


class RSAKeyTransport:
    """
    Stateful сессия RSA key transport.

    Один экземпляр обслуживает один handshake и не разделяется между
    потоками.

    Example:
        >>> client = RSAKeyTransport()
        >>> client.set_server_public_key(server_public_pem)
        >>> client.generate_pre_master_secret(0x0303)
        >>> encrypted = client.encrypt_pre_master_secret()
        >>> server = RSAKeyTransport()
        >>> server.decrypt_pre_master_secret(encrypted, server_private_pem) == \\
        ...     client.get_pre_master_secret()
        True
    """

    name = "rsa"

    def __init__(self) -> None:
        self._server_public_key = b""
        self._pre_master_secret = b""
        self._logger = logger.getChild(self.name)

    def set_server_public_key(self, public_key: bytes) -> None:
        """Задать публичный ключ сервера (PEM или DER)."""
        _ensure_bytes(public_key, "public_key")
        self._server_public_key = public_key

    def get_server_public_key(self) -> bytes:
        return self._server_public_key

    def generate_pre_master_secret(self, version: int) -> bytes:
        """
        Сгенерировать pre-master secret.

        Args:
            version: Версия протокола клиента (например, 0x0303 для TLS 1.2)

        Returns:
            48 байт: 2 байта версии + 46 случайных байт

        Raises:
            InvalidParameterError: Если version вне диапазона uint16
        """
        if isinstance(version, bool) or not isinstance(version, int):
            raise InvalidParameterError(
                f"version must be int, got {type(version).__name__}",
                algorithm=self.name,
                parameter="version",
            )
        if not 0 <= version <= 0xFFFF:
            raise InvalidParameterError(
                f"version must fit in 16 bits, got {version}",
                algorithm=self.name,
                parameter="version",
            )

        self._pre_master_secret = struct.pack(">H", version) + secrets.token_bytes(
            PRE_MASTER_RANDOM_SIZE
        )
        self._logger.debug(f"Generated pre-master secret for version 0x{version:04x}")
        return self._pre_master_secret

    def encrypt_pre_master_secret(self) -> bytes:
        """
        Зашифровать pre-master secret публичным ключом сервера.

        Raises:
            InvalidParameterError: Pre-master secret не сгенерирован,
                затем публичный ключ сервера не задан
            InvalidKeyError: Публичный ключ не загружается или не RSA
            KeyGenerationError: Шифрование не удалось
        """
        if not self._pre_master_secret:
            raise InvalidParameterError(
                "Pre-master secret not generated",
                algorithm=self.name,
                parameter="pre_master_secret",
            )
        if not self._server_public_key:
            raise InvalidParameterError(
                "Server public key not set",
                algorithm=self.name,
                parameter="server_public_key",
            )

        try:
            public_key = _load_public_key(self._server_public_key)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load server public key", algorithm=self.name
            ) from exc

        try:
            encrypted = public_key.encrypt(self._pre_master_secret, padding.PKCS1v15())
        except Exception as exc:
            self._logger.error(f"RSA encryption failed: {exc}", exc_info=True)
            raise KeyGenerationError(
                "Failed to encrypt pre-master secret", algorithm=self.name
            ) from exc

        self._logger.debug(f"Encrypted pre-master secret: {len(encrypted)}B")
        return encrypted

    def decrypt_pre_master_secret(
        self, encrypted_pre_master_secret: bytes, private_key: bytes
    ) -> bytes:
        """
        Расшифровать pre-master secret (сторона сервера) и сохранить его.

        Args:
            encrypted_pre_master_secret: Шифртекст от клиента
            private_key: Приватный ключ сервера (PEM или DER)

        Raises:
            TypeError: Если аргументы не являются bytes
            InvalidKeyError: Приватный ключ не загружается или не RSA
            KeyGenerationError: Расшифровка не удалась или результат
                не равен 48 байтам
        """
        _ensure_bytes(encrypted_pre_master_secret, "encrypted_pre_master_secret")
        _ensure_bytes(private_key, "private_key")

        try:
            key = _load_private_key(private_key)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load server private key", algorithm=self.name
            ) from exc

        try:
            decrypted = key.decrypt(encrypted_pre_master_secret, padding.PKCS1v15())
        except Exception as exc:
            self._logger.error(f"RSA decryption failed: {exc}", exc_info=True)
            raise KeyGenerationError(
                "Failed to decrypt pre-master secret", algorithm=self.name
            ) from exc

        if len(decrypted) != PRE_MASTER_SECRET_SIZE:
            raise KeyGenerationError(
                f"Decrypted pre-master secret must be {PRE_MASTER_SECRET_SIZE} bytes, "
                f"got {len(decrypted)} bytes",
                algorithm=self.name,
            )

        self._pre_master_secret = decrypted
        return decrypted

    def get_pre_master_secret(self) -> bytes:
        """Pre-master secret или b"" если он ещё не получен."""
        return self._pre_master_secret

    def __repr__(self) -> str:
        return (
            f"RSAKeyTransport(server_public_key_set={bool(self._server_public_key)}, "
            f"pre_master_secret_set={bool(self._pre_master_secret)})"
        )


__all__ = [
    "PRE_MASTER_SECRET_SIZE",
    "PRE_MASTER_RANDOM_SIZE",
    "RSAKeyTransport",
]
