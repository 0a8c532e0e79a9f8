"""
Обмен ключами TLS: единый контракт над DHE, ECDHE, X25519, X448, RSA и TLS 1.3.

EN: One call shape for structurally different key agreement mechanisms:
generate a local key pair, then combine a local private value with a peer
public value into a shared secret.

Example:
    >>> from src.tls_kex import get_kex_algorithm
    >>> kex = get_kex_algorithm("x25519")
    >>> alice, bob = kex.generate_keypair(), kex.generate_keypair()
    >>> kex.compute_shared_secret(alice.private_key, bob.public_key) == \\
    ...     kex.compute_shared_secret(bob.private_key, alice.public_key)
    True

Логирование:
    Уровень задаётся переменной окружения TLS_KEX_LOG_LEVEL
    (DEBUG, INFO, WARNING, ERROR, CRITICAL). Без неё пакет не добавляет
    обработчиков и только передаёт записи приложению.
"""

import logging
import os
import sys
from typing import Dict

_LOGGER_NAME = "src.tls_kex"


def _setup_logging() -> None:
    """
    Инициализировать логирование пакета.

    Идемпотентна: повторные вызовы не добавляют обработчиков.
    """
    package_logger = logging.getLogger(_LOGGER_NAME)
    if package_logger.handlers:
        return

    log_level_str = os.environ.get("TLS_KEX_LOG_LEVEL", "").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str)
    if log_level is None:
        package_logger.addHandler(logging.NullHandler())
        return

    formatter = logging.Formatter(
        fmt=("[%(asctime)s] %(levelname)-8s " "[%(name)s.%(funcName)s:%(lineno)d] %(message)s"),
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    package_logger.setLevel(log_level)
    package_logger.addHandler(console_handler)


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён пакета.

    Example:
        >>> get_logger("handshake").name
        'src.tls_kex.handshake'
    """
    if module_name.startswith(_LOGGER_NAME):
        return logging.getLogger(module_name)
    return logging.getLogger(f"{_LOGGER_NAME}.{module_name.lstrip('.')}")


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить доступность зависимостей.

    Returns:
        {"cryptography": bool, "blake3": bool}. blake3 нужен только для
        хеша "blake3" в SecretDerivation.
    """
    dependencies: Dict[str, bool] = {}

    try:
        import cryptography  # noqa: F401

        dependencies["cryptography"] = True
    except ImportError:
        dependencies["cryptography"] = False

    try:
        import blake3  # noqa: F401

        dependencies["blake3"] = True
    except ImportError:
        dependencies["blake3"] = False

    return dependencies


_setup_logging()

# Импорты размещены после настройки логирования
from src.tls_kex.algorithms import (  # noqa: E402
    EllipticCurveExchange,
    ECDHEKeyExchange,
    FiniteFieldExchange,
    RSAKeyTransport,
    SecretDerivation,
    TLS13KeyExchange,
    X25519Exchange,
    X448Exchange,
)
from src.tls_kex.config import (  # noqa: E402
    DEFAULT_CURVE,
    DEFAULT_DH_GROUP,
    DEFAULT_HASH,
    KeyPairOptions,
    SecretOptions,
)
from src.tls_kex.core import (  # noqa: E402
    AlgorithmNotFoundError,
    GroupKind,
    GroupParameter,
    GroupRegistry,
    InvalidCurveError,
    InvalidKeyError,
    InvalidParameterError,
    KeyExchangeError,
    KeyExchangeFailedError,
    KeyExchangeProtocol,
    KeyGenerationError,
    KeyPair,
    PreMasterSecretProtocol,
    UnsupportedOperationError,
)
from src.tls_kex.factory import (  # noqa: E402
    KEY_EXCHANGE_ALGORITHMS,
    available_algorithms,
    get_kex_algorithm,
)
from src.tls_kex.wire import (  # noqa: E402
    KeyShareEntry,
    decode_client_key_shares,
    decode_key_share_entry,
    encode_client_key_shares,
    encode_key_share_entry,
)

__all__ = [
    # Utilities
    "get_logger",
    "check_dependencies",
    # Factory
    "KEY_EXCHANGE_ALGORITHMS",
    "available_algorithms",
    "get_kex_algorithm",
    # Variants
    "FiniteFieldExchange",
    "EllipticCurveExchange",
    "X25519Exchange",
    "X448Exchange",
    "RSAKeyTransport",
    "ECDHEKeyExchange",
    "TLS13KeyExchange",
    "SecretDerivation",
    # Config
    "DEFAULT_DH_GROUP",
    "DEFAULT_CURVE",
    "DEFAULT_HASH",
    "KeyPairOptions",
    "SecretOptions",
    # Core
    "GroupKind",
    "GroupParameter",
    "GroupRegistry",
    "KeyPair",
    "KeyExchangeProtocol",
    "PreMasterSecretProtocol",
    # Exceptions
    "KeyExchangeError",
    "InvalidParameterError",
    "InvalidCurveError",
    "InvalidKeyError",
    "KeyGenerationError",
    "KeyExchangeFailedError",
    "UnsupportedOperationError",
    "AlgorithmNotFoundError",
    # Wire
    "KeyShareEntry",
    "encode_key_share_entry",
    "decode_key_share_entry",
    "encode_client_key_shares",
    "decode_client_key_shares",
]
