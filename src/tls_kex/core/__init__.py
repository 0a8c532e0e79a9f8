"""
Ядро: исключения, протоколы, модели и реестр групп.
"""

from src.tls_kex.core.exceptions import (
    AlgorithmNotFoundError,
    InvalidCurveError,
    InvalidKeyError,
    InvalidParameterError,
    KeyExchangeError,
    KeyExchangeFailedError,
    KeyGenerationError,
    UnsupportedOperationError,
)
from src.tls_kex.core.models import GroupKind, GroupParameter, KeyPair
from src.tls_kex.core.protocols import KeyExchangeProtocol, PreMasterSecretProtocol
from src.tls_kex.core.registry import GroupRegistry

__all__ = [
    "AlgorithmNotFoundError",
    "InvalidCurveError",
    "InvalidKeyError",
    "InvalidParameterError",
    "KeyExchangeError",
    "KeyExchangeFailedError",
    "KeyGenerationError",
    "UnsupportedOperationError",
    "GroupKind",
    "GroupParameter",
    "KeyPair",
    "KeyExchangeProtocol",
    "PreMasterSecretProtocol",
    "GroupRegistry",
]
