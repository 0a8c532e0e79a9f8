"""
Пост-обработка сырого общего значения хеш-функцией.

SecretDerivation превращает результат DH / ECDH в секрет фиксированной
длины. Длина результата определяется хешем, а не длиной сырого значения.

Поддерживаемые хеши:
- SHA-2: sha256 (по умолчанию), sha384, sha512
- SHA-3: sha3-256, sha3-512
- BLAKE: blake2b, blake2s (hashlib), blake3 (пакет blake3)

Example:
    >>> derivation = SecretDerivation("sha384")
    >>> len(derivation.derive(b"raw shared value"))
    48
"""

from __future__ import annotations

import hashlib
import logging
from typing import Final, List, Mapping

from src.tls_kex.config import DEFAULT_HASH, SecretOptions
from src.tls_kex.core.exceptions import (
    InvalidParameterError,
    KeyExchangeFailedError,
    UnsupportedOperationError,
)
from src.tls_kex.core.protocols import SecretOptionsLike

logger = logging.getLogger(__name__)


# ==============================================================================
# CONSTANTS
# ==============================================================================

BLAKE3_OUTPUT_SIZE: Final[int] = 32

# Public name -> hashlib.new() name
_HASHLIB_NAMES: Final[Mapping[str, str]] = {
    "sha256": "sha256",
    "sha384": "sha384",
    "sha512": "sha512",
    "sha3-256": "sha3_256",
    "sha3-512": "sha3_512",
    "blake2b": "blake2b",
    "blake2s": "blake2s",
}

_BLAKE3 = "blake3"

SUPPORTED_HASHES: Final[tuple[str, ...]] = (*_HASHLIB_NAMES, _BLAKE3)


# ==============================================================================
# SECRET DERIVATION
# ==============================================================================


class SecretDerivation:
    """
    Хеширование сырого общего значения в финальный секрет.

    Имя хеша проверяется в конструкторе, до любого обращения к
    криптографическому провайдеру.

    Attributes:
        hash_name: Каноническое имя хеша ("sha256", "blake3", ...)

    Raises:
        InvalidParameterError: Неизвестное имя хеша
    """

    def __init__(self, hash_name: str = DEFAULT_HASH) -> None:
        normalized = hash_name.strip().lower() if isinstance(hash_name, str) else ""
        if normalized not in SUPPORTED_HASHES:
            raise InvalidParameterError(
                f"Unsupported hash algorithm: {hash_name}. "
                f"Available: {', '.join(SUPPORTED_HASHES)}",
                parameter="hash",
            )
        self.hash_name = normalized

    @classmethod
    def from_options(cls, options: SecretOptionsLike = None) -> "SecretDerivation":
        """Создать из SecretOptions или mapping {"hash": ...}."""
        return cls(SecretOptions.from_mapping(options).hash_or_default)

    @staticmethod
    def supported_hashes() -> List[str]:
        """Имена доступных хешей."""
        return list(SUPPORTED_HASHES)

    @property
    def digest_size(self) -> int:
        """Длина результата derive() в байтах."""
        if self.hash_name == _BLAKE3:
            return BLAKE3_OUTPUT_SIZE
        return hashlib.new(_HASHLIB_NAMES[self.hash_name]).digest_size

    def derive(self, raw: bytes) -> bytes:
        """
        Захешировать сырое общее значение.

        Args:
            raw: Результат DH / ECDH

        Returns:
            Секрет длиной digest_size байт

        Raises:
            TypeError: Если raw не является bytes
            InvalidParameterError: Если raw пустое
            UnsupportedOperationError: Если пакет blake3 не установлен
            KeyExchangeFailedError: Если хеширование не удалось
        """
        if not isinstance(raw, bytes):
            raise TypeError(f"raw must be bytes, got {type(raw).__name__}")

        if len(raw) == 0:
            raise InvalidParameterError("Cannot derive secret from empty input")

        if self.hash_name == _BLAKE3:
            return self._derive_blake3(raw)

        try:
            hasher = hashlib.new(_HASHLIB_NAMES[self.hash_name])
            hasher.update(raw)
            secret = hasher.digest()
        except Exception as exc:
            logger.error(
                f"{self.hash_name.upper()} derivation failed for {len(raw)} bytes: {exc}",
                exc_info=True,
            )
            raise KeyExchangeFailedError(
                f"{self.hash_name.upper()} secret derivation failed"
            ) from exc

        logger.debug(f"Derived {len(secret)}B secret from {len(raw)}B ({self.hash_name})")
        return secret

    def _derive_blake3(self, raw: bytes) -> bytes:
        try:
            import blake3

            secret: bytes = blake3.blake3(raw).digest()

        except ImportError as exc:
            raise UnsupportedOperationError(
                "BLAKE3 secret derivation is not available",
                reason="blake3 library not installed",
            ) from exc

        except Exception as exc:
            logger.error(f"BLAKE3 derivation failed for {len(raw)} bytes: {exc}", exc_info=True)
            raise KeyExchangeFailedError("BLAKE3 secret derivation failed") from exc

        logger.debug(f"Derived {len(secret)}B secret from {len(raw)}B (blake3)")
        return secret

    def __repr__(self) -> str:
        return f"SecretDerivation(hash_name={self.hash_name!r})"


__all__ = [
    "BLAKE3_OUTPUT_SIZE",
    "SUPPORTED_HASHES",
    "SecretDerivation",
]
