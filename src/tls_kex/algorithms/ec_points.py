"""
EC ключи в wire-кодировке TLS: X9.62 uncompressed point.

Используется сессиями TLS 1.2 ECDHE и TLS 1.3 key share для кривых NIST.
Приватный ключ хранится внутри сессии как DER PKCS#8.
"""

from __future__ import annotations

import logging
from typing import Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from src.tls_kex.algorithms import elliptic_curve
from src.tls_kex.core.exceptions import (
    InvalidCurveError,
    InvalidKeyError,
    KeyExchangeFailedError,
    KeyGenerationError,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)


def _curve_for(curve_name: str, algorithm: str) -> ec.EllipticCurve:
    curve_cls = elliptic_curve.SUPPORTED_CURVES.get(curve_name)
    if curve_cls is None:
        raise InvalidCurveError(
            f"Unsupported elliptic curve: {curve_name}",
            algorithm=algorithm,
            requested=curve_name,
        )
    return curve_cls()


def generate_point_key(curve_name: str, *, algorithm: str) -> Tuple[bytes, bytes]:
    """
    Сгенерировать EC ключ и вернуть (private DER, public X9.62 point).

    Raises:
        InvalidCurveError: Кривая не поддерживается
        UnsupportedOperationError: Провайдер не поддерживает кривую
        KeyGenerationError: Провайдер не смог создать или экспортировать ключ
    """
    curve = _curve_for(curve_name, algorithm)

    try:
        private_key_obj = ec.generate_private_key(curve)

        private_der = private_key_obj.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_point = private_key_obj.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )

    except UnsupportedAlgorithm as exc:
        raise UnsupportedOperationError(
            f"Curve {curve_name} is not supported by the provider",
            algorithm=algorithm,
            reason=str(exc),
        ) from exc
    except Exception as exc:
        logger.error(f"EC key generation failed for {curve_name}: {exc}", exc_info=True)
        raise KeyGenerationError(
            f"Failed to create EC key for {curve_name}", algorithm=algorithm
        ) from exc

    logger.debug(
        f"Generated {curve_name} key share: "
        f"private={len(private_der)}B, point={len(public_point)}B"
    )
    return private_der, public_point


def derive_from_point(
    curve_name: str, private_der: bytes, peer_point: bytes, *, algorithm: str
) -> bytes:
    """
    Сырой ECDH между локальным DER ключом и X9.62 точкой собеседника.

    Raises:
        InvalidKeyError: Точка не декодируется или приватный ключ не загружается
        InvalidCurveError: Приватный ключ лежит на другой кривой
        UnsupportedOperationError: Нативный ECDH недоступен
        KeyExchangeFailedError: Провайдер отклонил комбинацию
    """
    curve = _curve_for(curve_name, algorithm)

    try:
        peer_key = ec.EllipticCurvePublicKey.from_encoded_point(curve, peer_point)
    except (ValueError, TypeError) as exc:
        raise InvalidKeyError(
            f"Failed to load server EC public key ({curve_name})", algorithm=algorithm
        ) from exc

    try:
        private_key_obj = serialization.load_der_private_key(private_der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise InvalidKeyError(
            "Failed to load client EC private key", algorithm=algorithm
        ) from exc

    if not isinstance(private_key_obj, ec.EllipticCurvePrivateKey):
        raise InvalidKeyError("Client private key must be an EC key", algorithm=algorithm)
    if private_key_obj.curve.name != curve.name:
        raise InvalidCurveError(
            f"Curve mismatch: private uses {private_key_obj.curve.name}, "
            f"public uses {curve.name}",
            algorithm=algorithm,
            expected=private_key_obj.curve.name,
            actual=curve.name,
        )

    if not elliptic_curve.native_derive_available():
        raise UnsupportedOperationError(
            "ECDH derive is not available in the cryptographic provider",
            algorithm=algorithm,
            reason="native derive capability missing",
        )

    try:
        shared = private_key_obj.exchange(ec.ECDH(), peer_key)
    except Exception as exc:
        logger.error(f"ECDH on {curve_name} failed: {exc}", exc_info=True)
        raise KeyExchangeFailedError(
            f"ECDH on {curve_name} failed", algorithm=algorithm
        ) from exc

    logger.debug(f"ECDH ({curve_name}): {len(shared)}B raw shared secret")
    return shared


__all__ = [
    "generate_point_key",
    "derive_from_point",
]
