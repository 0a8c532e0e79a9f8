"""
Централизованные исключения модуля обмена ключами TLS.

Иерархия типизированных исключений для всех вариантов key exchange
(DHE, ECDHE, X25519, X448, RSA key transport, TLS 1.3 key share).
Обеспечивает единообразную обработку ошибок и безопасность
(NO раскрытия секретных данных).

Example:
    >>> from src.tls_kex.core.exceptions import KeyExchangeError
    >>> try:
    ...     kex.compute_shared_secret(private_key, peer_public_key)
    ... except KeyExchangeError as e:
    ...     logger.error(f"Key exchange failed: {e}")
    ...     print(f"Algorithm: {e.algorithm}")

Иерархия:
    KeyExchangeError (базовое)
    ├── InvalidParameterError
    ├── InvalidCurveError
    ├── InvalidKeyError
    ├── KeyGenerationError
    ├── KeyExchangeFailedError
    ├── UnsupportedOperationError
    └── AlgorithmNotFoundError

Security Note:
    Все исключения НЕ раскрывают:
    - Приватные ключи или их части
    - Shared secret / pre-master secret
    - Другие чувствительные данные
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__: list[str] = [
    "KeyExchangeError",
    "InvalidParameterError",
    "InvalidCurveError",
    "InvalidKeyError",
    "KeyGenerationError",
    "KeyExchangeFailedError",
    "UnsupportedOperationError",
    "AlgorithmNotFoundError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class KeyExchangeError(Exception):
    """
    Базовое исключение для всех ошибок обмена ключами.

    Attributes:
        message: Человекочитаемое сообщение об ошибке
        algorithm: Имя алгоритма, вызвавшего ошибку (опционально)
        context: Дополнительный контекст для отладки (опционально)

    Security Note:
        Сообщения ошибок НЕ должны содержать ключи или секреты.
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Инициализация базового исключения.

        Args:
            message: Человекочитаемое описание ошибки
            algorithm: Имя алгоритма (например, "ecdhe")
            context: Дополнительный контекст (без секретов!)
        """
        super().__init__(message)
        self.message = message
        self.algorithm = algorithm
        self.context = context or {}

    def __str__(self) -> str:
        """
        Строковое представление исключения.

        Example:
            >>> str(KeyExchangeError("Operation failed", algorithm="dhe"))
            'KeyExchangeError: Operation failed [algorithm=dhe]'
        """
        parts = [self.__class__.__name__, ": ", self.message]

        if self.algorithm:
            parts.append(f" [algorithm={self.algorithm}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        """Представление для отладки."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"algorithm={self.algorithm!r}, "
            f"context={self.context!r})"
        )


# ==============================================================================
# VALIDATION ERRORS
# ==============================================================================


class InvalidParameterError(KeyExchangeError):
    """
    Отсутствующий или противоречивый параметр вызова.

    Проверяется ДО любого обращения к криптографическому провайдеру.

    Attributes:
        parameter: Имя параметра (если применимо)

    Example:
        >>> raise InvalidParameterError("Server public key not set", parameter="server_public_key")
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        parameter: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        ctx: Dict[str, Any] = dict(context or {})
        if parameter is not None:
            ctx["parameter"] = parameter

        super().__init__(message, algorithm=algorithm, context=ctx)
        self.parameter = parameter


class InvalidCurveError(KeyExchangeError):
    """
    Неизвестная или несовпадающая кривая / группа.

    Attributes:
        requested: Запрошенный идентификатор (неизвестная группа)
        expected: Кривая локального приватного ключа (при несовпадении)
        actual: Кривая публичного ключа собеседника (при несовпадении)

    Example:
        >>> raise InvalidCurveError(
        ...     "Curve mismatch",
        ...     expected="secp256r1",
        ...     actual="secp384r1",
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        requested: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if requested is not None:
            context["requested"] = requested
        if expected is not None:
            context["expected"] = expected
        if actual is not None:
            context["actual"] = actual

        super().__init__(message, algorithm=algorithm, context=context)
        self.requested = requested
        self.expected = expected
        self.actual = actual


# ==============================================================================
# KEY ERRORS
# ==============================================================================


class InvalidKeyError(KeyExchangeError):
    """
    Некорректный ключевой материал.

    Raises когда:
    - Ключ не удалось загрузить / декодировать
    - Ключ имеет неверный тип (например, RSA вместо EC)
    - Ключ имеет неверную длину (fixed-size кривые)

    Attributes:
        expected_size: Ожидаемый размер ключа в байтах
        actual_size: Фактический размер ключа в байтах
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        expected_size: Optional[int] = None,
        actual_size: Optional[int] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if expected_size is not None:
            context["expected_size"] = expected_size
        if actual_size is not None:
            context["actual_size"] = actual_size

        super().__init__(message, algorithm=algorithm, context=context)
        self.expected_size = expected_size
        self.actual_size = actual_size


class KeyGenerationError(KeyExchangeError):
    """
    Провайдер отказался сгенерировать, экспортировать или расшифровать ключ.

    Example:
        >>> raise KeyGenerationError("Failed to export EC private key", algorithm="ecdhe")
    """

    pass


class KeyExchangeFailedError(KeyExchangeError):
    """
    Провайдер отказался комбинировать корректные на вид ключи.

    Example:
        >>> raise KeyExchangeFailedError("DH combination rejected", algorithm="dhe")
    """

    pass


# ==============================================================================
# CAPABILITY ERRORS
# ==============================================================================


class UnsupportedOperationError(KeyExchangeError):
    """
    Операция недоступна в текущей сборке / окружении.

    В отличие от остальных ошибок, это НЕ фатальный сбой операции:
    операция может стать доступной после обновления провайдера.

    Attributes:
        reason: Причина отсутствия поддержки
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if reason is not None:
            context["reason"] = reason

        super().__init__(message, algorithm=algorithm, context=context)
        self.reason = reason


class AlgorithmNotFoundError(KeyExchangeError):
    """
    Алгоритм обмена ключами не найден в фабрике.

    Attributes:
        algorithm_name: Имя запрошенного алгоритма
        available: Список доступных алгоритмов
    """

    def __init__(
        self,
        algorithm_name: str,
        available: Optional[List[str]] = None,
    ) -> None:
        message = f"Key exchange algorithm '{algorithm_name}' not found"

        if available:
            message += f". Available: {', '.join(available)}"

        super().__init__(
            message,
            algorithm=algorithm_name,
            context={"available_count": len(available) if available else 0},
        )
        self.algorithm_name = algorithm_name
        self.available = available or []
