"""
TLS Key Exchange
================

Единая абстракция обмена ключами для TLS стека.

Пакет предоставляет:
    - Реестр групп и кривых (RFC 3526 MODP, NIST P-256/384/521, X25519/X448)
    - Варианты обмена: DHE, ECDHE, X25519, X448 (placeholder), RSA key transport
    - TLS 1.3 key share и его wire-кодирование

Пример:
    >>> from src.tls_kex import get_kex_algorithm
    >>> kex = get_kex_algorithm("ecdhe")
    >>> alice = kex.generate_keypair({"curve": "secp256r1"})

Python: 3.11+
"""

import sys

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__description__ = "Unified TLS key exchange abstraction"
__license__ = "MIT"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# =============================================================================
# ПРОВЕРКА ВЕРСИИ PYTHON
# =============================================================================

if sys.version_info < (3, 11):
    raise RuntimeError(
        f"TLS Key Exchange требует Python 3.11 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )
