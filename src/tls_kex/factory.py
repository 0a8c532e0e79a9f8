"""
Фабрика вариантов обмена ключами.

Набор вариантов закрыт: он определяется протоколом TLS, а не
расширяется во время выполнения.

    dhe     → FiniteFieldExchange
    ecdhe   → EllipticCurveExchange
    x25519  → X25519Exchange
    x448    → X448Exchange (всегда UnsupportedOperationError)
    rsa     → RSAKeyTransport (stateful, PreMasterSecretProtocol)
    tls13   → TLS13KeyExchange
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Type, Union

from src.tls_kex.algorithms.elliptic_curve import EllipticCurveExchange
from src.tls_kex.algorithms.finite_field import FiniteFieldExchange
from src.tls_kex.algorithms.key_transport import RSAKeyTransport
from src.tls_kex.algorithms.modern_curve import X25519Exchange, X448Exchange
from src.tls_kex.algorithms.tls13 import TLS13KeyExchange
from src.tls_kex.core.exceptions import AlgorithmNotFoundError

logger = logging.getLogger(__name__)


KeyExchangeAlgorithm = Union[
    FiniteFieldExchange,
    EllipticCurveExchange,
    X25519Exchange,
    X448Exchange,
    RSAKeyTransport,
    TLS13KeyExchange,
]

KEY_EXCHANGE_ALGORITHMS: Mapping[str, Type[KeyExchangeAlgorithm]] = {
    "dhe": FiniteFieldExchange,
    "ecdhe": EllipticCurveExchange,
    "x25519": X25519Exchange,
    "x448": X448Exchange,
    "rsa": RSAKeyTransport,
    "tls13": TLS13KeyExchange,
}


def available_algorithms() -> List[str]:
    """Имена всех вариантов в порядке регистрации."""
    return list(KEY_EXCHANGE_ALGORITHMS)


def get_kex_algorithm(algorithm_id: str) -> KeyExchangeAlgorithm:
    """
    Получить новый экземпляр варианта по имени.

    Args:
        algorithm_id: Имя алгоритма (регистр не важен)

    Returns:
        Новый экземпляр. Stateful варианты (rsa, tls13 в режиме сессии)
        нельзя разделять между handshake.

    Raises:
        AlgorithmNotFoundError: Если имя неизвестно

    Example:
        >>> kex = get_kex_algorithm("X25519")
        >>> kex.name
        'x25519'
    """
    key = algorithm_id.strip().lower() if isinstance(algorithm_id, str) else algorithm_id
    try:
        kex_cls = KEY_EXCHANGE_ALGORITHMS[key]
    except (KeyError, TypeError) as exc:
        raise AlgorithmNotFoundError(
            str(algorithm_id), available=available_algorithms()
        ) from exc

    logger.debug(f"Creating key exchange instance: {key}")
    return kex_cls()


__all__ = [
    "KeyExchangeAlgorithm",
    "KEY_EXCHANGE_ALGORITHMS",
    "available_algorithms",
    "get_kex_algorithm",
]
