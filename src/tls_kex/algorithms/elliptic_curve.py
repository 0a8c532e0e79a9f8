"""
ECDHE — ephemeral Elliptic Curve Diffie-Hellman на именованных кривых.

Кривые: secp256r1 (P-256, prime256v1), secp384r1 (P-384), secp521r1 (P-521).

В отличие от DHE, неизвестная кривая — это жёсткая ошибка
(InvalidCurveError), а не подстановка значения по умолчанию.

Ключи:
    - private_key: PEM, PKCS#8
    - public_key: PEM, SubjectPublicKeyInfo

Capability gate:
    Комбинация выполняется только через нативный ECDH провайдера.
    Если он недоступен, операция завершается UnsupportedOperationError.
"""

from __future__ import annotations

import logging
from typing import Final, Mapping, Type

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from src.tls_kex.algorithms.base import _KeyExchangeBase, _ensure_bytes
from src.tls_kex.algorithms.derivation import SecretDerivation
from src.tls_kex.config import KeyPairOptions
from src.tls_kex.core.exceptions import (
    InvalidCurveError,
    InvalidKeyError,
    KeyExchangeFailedError,
    KeyGenerationError,
    UnsupportedOperationError,
)
from src.tls_kex.core.models import GroupKind, GroupParameter, KeyPair
from src.tls_kex.core.protocols import KeyPairOptionsLike, SecretOptionsLike

logger = logging.getLogger(__name__)


# Registry identifier -> provider curve class
SUPPORTED_CURVES: Final[Mapping[str, Type[ec.EllipticCurve]]] = {
    "secp256r1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
}


def native_derive_available() -> bool:
    """True если провайдер предоставляет нативный ECDH."""
    return hasattr(ec, "ECDH")


class EllipticCurveExchange(_KeyExchangeBase):
    """
    ECDHE на именованных кривых NIST.

    Общий секрет — сырая x-координата ECDH, захешированная SecretDerivation.

    Example:
        >>> kex = EllipticCurveExchange()
        >>> alice = kex.generate_keypair({"curve": "secp384r1"})
        >>> alice.group_name
        'secp384r1'
    """

    name = "ecdhe"

    def _resolve_curve(self, requested: str) -> GroupParameter:
        group = self._registry.resolve(requested)
        if (
            group is None
            or group.kind is not GroupKind.ELLIPTIC_CURVE
            or group.identifier not in SUPPORTED_CURVES
        ):
            raise InvalidCurveError(
                f"Unsupported curve: {requested}. "
                f"Supported: {', '.join(SUPPORTED_CURVES)}",
                algorithm=self.name,
                requested=requested,
            )
        return group

    def _require_native_derive(self) -> None:
        if not native_derive_available():
            raise UnsupportedOperationError(
                "ECDH derive is not available in the cryptographic provider",
                algorithm=self.name,
                reason="native derive capability missing",
            )

    def generate_keypair(self, options: KeyPairOptionsLike = None) -> KeyPair:
        """
        Сгенерировать EC пару ключей.

        Args:
            options: {"curve": "secp256r1"} (по умолчанию DEFAULT_CURVE)

        Raises:
            InvalidParameterError: Неизвестный ключ в options
            InvalidCurveError: Кривая не поддерживается
            UnsupportedOperationError: Провайдер не поддерживает кривую
            KeyGenerationError: Провайдер не смог создать или экспортировать ключ
        """
        opts = KeyPairOptions.from_mapping(options)
        group = self._resolve_curve(opts.curve_or_default)
        curve = SUPPORTED_CURVES[group.identifier]()

        try:
            private_key_obj = ec.generate_private_key(curve)

            private_bytes = private_key_obj.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            public_bytes = private_key_obj.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )

        except UnsupportedAlgorithm as exc:
            raise UnsupportedOperationError(
                f"Curve {group.identifier} is not supported by the provider",
                algorithm=self.name,
                reason=str(exc),
            ) from exc
        except Exception as exc:
            self._logger.error(
                f"EC key generation failed for {group.identifier}: {exc}", exc_info=True
            )
            raise KeyGenerationError(
                f"Failed to generate EC key pair for {group.identifier}",
                algorithm=self.name,
            ) from exc

        self._logger.debug(
            f"Generated EC keypair ({group.identifier}): "
            f"private={len(private_bytes)}B, public={len(public_bytes)}B"
        )

        return KeyPair(
            private_key=private_bytes,
            public_key=public_bytes,
            group=group,
            metadata={"curve": group.identifier, "bits": group.bits},
        )

    def compute_shared_secret(
        self,
        private_key: bytes,
        peer_public_key: bytes,
        options: SecretOptionsLike = None,
    ) -> bytes:
        """
        Вычислить общий секрет ECDH и захешировать его.

        Оба ключа обязаны лежать на одной кривой; несовпадение
        отклоняется ДО вычисления секрета.

        Raises:
            TypeError: Если ключи не являются bytes
            InvalidParameterError: Неизвестный хеш или ключ в options
            InvalidKeyError: Ключ не загружается или не является EC ключом
            InvalidCurveError: Кривые ключей не совпадают
            UnsupportedOperationError: Нативный ECDH недоступен
            KeyExchangeFailedError: Провайдер отклонил комбинацию
        """
        _ensure_bytes(private_key, "private_key")
        _ensure_bytes(peer_public_key, "peer_public_key")
        derivation = SecretDerivation.from_options(options)

        private_key_obj = self._load_private_key(private_key)
        peer_key_obj = self._load_public_key(peer_public_key)

        expected = private_key_obj.curve.name
        actual = peer_key_obj.curve.name
        if expected != actual:
            raise InvalidCurveError(
                f"Curve mismatch: private uses {expected}, public uses {actual}",
                algorithm=self.name,
                expected=expected,
                actual=actual,
            )

        self._require_native_derive()

        try:
            raw = private_key_obj.exchange(ec.ECDH(), peer_key_obj)

        except UnsupportedAlgorithm as exc:
            raise UnsupportedOperationError(
                f"ECDH on {expected} is not supported by the provider",
                algorithm=self.name,
                reason=str(exc),
            ) from exc
        except Exception as exc:
            self._logger.error(f"ECDH key exchange failed: {exc}", exc_info=True)
            raise KeyExchangeFailedError(
                "ECDH key exchange failed", algorithm=self.name
            ) from exc

        self._logger.debug(f"ECDH ({expected}): combined {len(raw)}B raw value")
        return derivation.derive(raw)

    # ------------------------------------------------------------------
    # Key loading
    # ------------------------------------------------------------------

    def _load_private_key(self, data: bytes) -> ec.EllipticCurvePrivateKey:
        try:
            key = serialization.load_pem_private_key(data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load EC private key", algorithm=self.name
            ) from exc

        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise InvalidKeyError(
                f"Private key must be an EC private key, got {type(key).__name__}",
                algorithm=self.name,
            )
        return key

    def _load_public_key(self, data: bytes) -> ec.EllipticCurvePublicKey:
        try:
            key = serialization.load_pem_public_key(data)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load EC public key", algorithm=self.name
            ) from exc

        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise InvalidKeyError(
                f"Public key must be an EC public key, got {type(key).__name__}",
                algorithm=self.name,
            )
        return key


__all__ = [
    "SUPPORTED_CURVES",
    "EllipticCurveExchange",
]
