"""
Варианты обмена ключами (по одному модулю на семейство).
"""

from src.tls_kex.algorithms.derivation import SecretDerivation
from src.tls_kex.algorithms.elliptic_curve import EllipticCurveExchange
from src.tls_kex.algorithms.finite_field import FiniteFieldExchange
from src.tls_kex.algorithms.modern_curve import X25519Exchange, X448Exchange
from src.tls_kex.algorithms.key_transport import RSAKeyTransport
from src.tls_kex.algorithms.ecdhe_session import ECDHEKeyExchange
from src.tls_kex.algorithms.tls13 import TLS13KeyExchange

__all__ = [
    "SecretDerivation",
    "EllipticCurveExchange",
    "FiniteFieldExchange",
    "X25519Exchange",
    "X448Exchange",
    "RSAKeyTransport",
    "ECDHEKeyExchange",
    "TLS13KeyExchange",
]
