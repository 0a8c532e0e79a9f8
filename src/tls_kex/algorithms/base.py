"""
Общие помощники для вариантов обмена ключами.

- _ensure_bytes / _validate_key_size — Zero Trust проверки входа
- _KeyExchangeBase — child logger и доступ к реестру групп
"""

from __future__ import annotations

import logging
from typing import ClassVar, Optional

from src.tls_kex.core.exceptions import InvalidKeyError
from src.tls_kex.core.registry import GroupRegistry

logger = logging.getLogger(__name__)


def _ensure_bytes(value: bytes, name: str) -> None:
    """
    Проверить, что значение является bytes.

    Raises:
        TypeError: Если value не является bytes
    """
    if not isinstance(value, bytes):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")


def _validate_key_size(
    key: bytes, expected_size: int, key_name: str, algorithm: str
) -> None:
    """
    Проверить размер ключа.

    Raises:
        InvalidKeyError: Если размер ключа неверен
    """
    if len(key) != expected_size:
        raise InvalidKeyError(
            f"{algorithm} {key_name} must be {expected_size} bytes, "
            f"got {len(key)} bytes",
            algorithm=algorithm.lower(),
            expected_size=expected_size,
            actual_size=len(key),
        )


class _KeyExchangeBase:
    """
    Базовый класс вариантов ExchangeContract.

    Attributes:
        name: Имя алгоритма в фабрике ("dhe", "ecdhe", ...)
    """

    name: ClassVar[str]

    def __init__(self, registry: Optional[GroupRegistry] = None) -> None:
        self._registry = registry if registry is not None else GroupRegistry.get_instance()
        self._logger = logging.getLogger(type(self).__module__).getChild(self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
