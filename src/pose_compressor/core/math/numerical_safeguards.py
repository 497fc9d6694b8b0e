"""
Numerical Safeguards — скалярные предикаты и контекст толерантности

Модуль задаёт численную основу для Matrix/ColumnVector:
- Проверка конечности float (NaN/Inf никогда не хранятся в матрицах)
- Epsilon-tolerant проверка на ноль
- NumericContext: единственный источник epsilon для всех сравнений

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. is_zero(NaN/Inf) всегда False — неопределённость никогда не считается нулём
2. epsilon всегда конечен и >= наименьшего положительного float
3. Один контекст управляет всеми сравнениями в рамках вычисления
"""

import math
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Final, Iterator, Optional

from pose_compressor.core.math.exceptions import (
    InvalidArgumentError,
    NonFiniteValueError,
    OutOfRangeError,
)

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Толерантность по умолчанию: |x| < EPS_DEFAULT считается нулём
EPS_DEFAULT: Final[float] = 1e-12

# Нижняя граница epsilon: наименьший положительный представимый float
EPS_FLOOR: Final[float] = math.ulp(0.0)


# =============================================================================
# ПРЕДИКАТЫ
# =============================================================================


def is_finite(value: float) -> bool:
    """
    Проверка, является ли float конечным (не NaN, не ±Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечно, False если NaN, Inf или int
        за пределами диапазона float
    """
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def require_finite(value: float, name: str = "value") -> float:
    """
    Валидация конечности значения.

    Raises:
        NonFiniteValueError: Если value равен NaN, ±Inf или не представим float
    """
    if isinstance(value, int) and not is_finite(value):
        raise NonFiniteValueError(f"{name} is out of float range")
    if not is_finite(value):
        raise NonFiniteValueError(f"{name} must be finite, got {value}")
    return value


# =============================================================================
# NUMERIC CONTEXT
# =============================================================================


@dataclass(frozen=True)
class NumericContext:
    """
    Контекст толерантности.

    Immutable value object: смена epsilon означает замену контекста,
    а не изменение существующего.
    """

    epsilon: float = EPS_DEFAULT

    def __post_init__(self) -> None:
        if not is_finite(self.epsilon) or self.epsilon < EPS_FLOOR:
            raise OutOfRangeError(
                f"epsilon must be finite and >= {EPS_FLOOR}, got {self.epsilon}"
            )

    def is_zero(self, value: float) -> bool:
        """True если value конечен и -epsilon < value < epsilon."""
        return is_finite(value) and -self.epsilon < value < self.epsilon


DEFAULT_CONTEXT: Final[NumericContext] = NumericContext()

_ACTIVE_CONTEXT: ContextVar[NumericContext] = ContextVar(
    "pose_compressor_numeric_context", default=DEFAULT_CONTEXT
)


def get_context() -> NumericContext:
    """Текущий активный контекст толерантности."""
    return _ACTIVE_CONTEXT.get()


def get_epsilon() -> float:
    """Текущий epsilon."""
    return _ACTIVE_CONTEXT.get().epsilon


def set_epsilon(value: float) -> None:
    """
    Замена epsilon для всех последующих вычислений.

    Должна вызываться один раз при инициализации, до начала вычислений.
    При ошибке валидации текущий epsilon не изменяется.

    Args:
        value: Новый epsilon

    Raises:
        OutOfRangeError: Если value меньше EPS_FLOOR, либо равен NaN или Inf
    """
    _ACTIVE_CONTEXT.set(NumericContext(epsilon=value))


@contextmanager
def local_epsilon(value: float) -> Iterator[NumericContext]:
    """
    Временный epsilon на время одного вычисления.

    Examples:
        >>> with local_epsilon(1e-6):
        ...     is_zero(1e-9)
        True
        >>> is_zero(1e-9)
        False
    """
    token = _ACTIVE_CONTEXT.set(NumericContext(epsilon=value))
    try:
        yield _ACTIVE_CONTEXT.get()
    finally:
        _ACTIVE_CONTEXT.reset(token)


def is_zero(value: float, eps: Optional[float] = None) -> bool:
    """
    Epsilon-tolerant проверка на ноль.

    Args:
        value: Проверяемое значение
        eps: Явная толерантность (default: epsilon активного контекста)

    Returns:
        True если value конечен и abs(value) < eps.
        Для NaN/Inf всегда False.

    Examples:
        >>> is_zero(1e-13)
        True
        >>> is_zero(-1e-12)
        False
        >>> is_zero(float("nan"))
        False
    """
    if eps is None:
        return get_context().is_zero(value)
    return is_finite(value) and -eps < value < eps


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_positive_int(value: int, name: str) -> None:
    """
    Валидация, что размерность положительна.

    Raises:
        InvalidArgumentError: Если value <= 0 или не int
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an int, got {type(value).__name__}")
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}")
