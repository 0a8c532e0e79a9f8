"""
Modern curves (RFC 7748): X25519 и placeholder для X448.

X25519:
    - private_key: 32 случайных байта (скаляр)
    - public_key: 32 байта (u-координата точки)
    - Общий секрет: 32 байта, сырой результат скалярного умножения
      БЕЗ дополнительного хеширования (в отличие от DHE / ECDHE)

X448:
    Вариант присутствует в фабрике и реализует контракт, но обе операции
    всегда завершаются UnsupportedOperationError с сообщением
    X448_UNSUPPORTED_MESSAGE. "Операция не поддерживается" означает
    повторить после обновления, а не фатальный сбой.
"""

from __future__ import annotations

import logging
import secrets
from typing import Final, NoReturn

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import x25519

from src.tls_kex.algorithms.base import (
    _KeyExchangeBase,
    _ensure_bytes,
    _validate_key_size,
)
from src.tls_kex.config import KeyPairOptions, SecretOptions
from src.tls_kex.core.exceptions import (
    KeyExchangeFailedError,
    KeyGenerationError,
    UnsupportedOperationError,
)
from src.tls_kex.core.models import KeyPair
from src.tls_kex.core.protocols import KeyPairOptionsLike, SecretOptionsLike

logger = logging.getLogger(__name__)


# ==============================================================================
# CONSTANTS
# ==============================================================================

X25519_KEY_SIZE: Final[int] = 32  # bytes
X448_KEY_SIZE: Final[int] = 56  # bytes

X448_UNSUPPORTED_MESSAGE: Final[str] = "X448 key exchange is not supported yet"


# ==============================================================================
# X25519
# ==============================================================================


class X25519Exchange(_KeyExchangeBase):
    """
    X25519 — ECDH на Curve25519 с фиксированными 32-байтными ключами.

    Security Note:
        Результат — сырой общий секрет. Перед использованием как ключа
        шифрования его нужно пропустить через KDF (HKDF в TLS 1.3).

    Example:
        >>> kex = X25519Exchange()
        >>> alice, bob = kex.generate_keypair(), kex.generate_keypair()
        >>> len(kex.compute_shared_secret(alice.private_key, bob.public_key))
        32
    """

    name = "x25519"
    KEY_SIZE = X25519_KEY_SIZE

    def generate_keypair(self, options: KeyPairOptionsLike = None) -> KeyPair:
        """
        Сгенерировать пару ключей X25519.

        Приватный скаляр — 32 байта из secrets.token_bytes(), публичный
        ключ — скалярное умножение базовой точки.

        Raises:
            InvalidParameterError: Неизвестный ключ в options
            KeyGenerationError: Провайдер не смог вычислить публичный ключ
        """
        KeyPairOptions.from_mapping(options)
        group = self._registry.require(self.name, algorithm=self.name)

        try:
            private_key_obj = x25519.X25519PrivateKey.from_private_bytes(
                secrets.token_bytes(self.KEY_SIZE)
            )

            private_bytes = private_key_obj.private_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PrivateFormat.Raw,
                encryption_algorithm=serialization.NoEncryption(),
            )
            public_bytes = private_key_obj.public_key().public_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PublicFormat.Raw,
            )

        except Exception as exc:
            self._logger.error(f"X25519 key generation failed: {exc}", exc_info=True)
            raise KeyGenerationError(
                "X25519 key generation failed", algorithm=self.name
            ) from exc

        self._logger.debug(
            f"Generated X25519 keypair: "
            f"private={len(private_bytes)}B, public={len(public_bytes)}B"
        )

        return KeyPair(
            private_key=private_bytes,
            public_key=public_bytes,
            group=group,
            metadata={"bits": group.bits},
        )

    def compute_shared_secret(
        self,
        private_key: bytes,
        peer_public_key: bytes,
        options: SecretOptionsLike = None,
    ) -> bytes:
        """
        Вычислить общий секрет X25519.

        Args:
            private_key: Свой приватный ключ (32 байта)
            peer_public_key: Публичный ключ собеседника (32 байта)
            options: Проверяется, но хеш НЕ применяется

        Returns:
            Сырой общий секрет (32 байта)

        Raises:
            TypeError: Если ключи не являются bytes
            InvalidKeyError: Если длина приватного или публичного ключа неверна
            KeyExchangeFailedError: Провайдер отклонил комбинацию
                (например, точка малого порядка)
        """
        _ensure_bytes(private_key, "private_key")
        _ensure_bytes(peer_public_key, "peer_public_key")
        _validate_key_size(private_key, self.KEY_SIZE, "private_key", "X25519")
        _validate_key_size(peer_public_key, self.KEY_SIZE, "public_key", "X25519")
        SecretOptions.from_mapping(options)

        try:
            private_key_obj = x25519.X25519PrivateKey.from_private_bytes(private_key)
            peer_public_key_obj = x25519.X25519PublicKey.from_public_bytes(
                peer_public_key
            )

            shared_secret = private_key_obj.exchange(peer_public_key_obj)

        except Exception as exc:
            self._logger.error(f"X25519 key exchange failed: {exc}", exc_info=True)
            raise KeyExchangeFailedError(
                "X25519 key exchange failed", algorithm=self.name
            ) from exc

        self._logger.debug(f"X25519: derived {len(shared_secret)}B shared secret")
        return shared_secret


# ==============================================================================
# X448 (placeholder)
# ==============================================================================


class X448Exchange(_KeyExchangeBase):
    """
    Placeholder для X448.

    Обе операции детерминированно выбрасывают UnsupportedOperationError
    с одним и тем же сообщением при каждом вызове.
    """

    name = "x448"
    KEY_SIZE = X448_KEY_SIZE

    def _unsupported(self) -> NoReturn:
        raise UnsupportedOperationError(
            X448_UNSUPPORTED_MESSAGE,
            algorithm=self.name,
            reason="provider capability not implemented",
        )

    def generate_keypair(self, options: KeyPairOptionsLike = None) -> KeyPair:
        """Всегда UnsupportedOperationError."""
        self._unsupported()

    def compute_shared_secret(
        self,
        private_key: bytes,
        peer_public_key: bytes,
        options: SecretOptionsLike = None,
    ) -> bytes:
        """Всегда UnsupportedOperationError."""
        self._unsupported()


__all__ = [
    "X25519_KEY_SIZE",
    "X448_KEY_SIZE",
    "X448_UNSUPPORTED_MESSAGE",
    "X25519Exchange",
    "X448Exchange",
]
