"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Проверку конечности float
2. Epsilon-tolerant проверку на ноль
3. NumericContext: валидацию epsilon и замену контекста
4. local_epsilon: восстановление контекста
5. Валидацию размерностей
"""

import math

import pytest

from pose_compressor.core.math import (
    DEFAULT_CONTEXT,
    EPS_DEFAULT,
    EPS_FLOOR,
    InvalidArgumentError,
    Matrix,
    NonFiniteValueError,
    NumericContext,
    OutOfRangeError,
    get_context,
    get_epsilon,
    is_finite,
    is_zero,
    local_epsilon,
    require_finite,
    set_epsilon,
)
from pose_compressor.core.math.numerical_safeguards import validate_positive_int

# =============================================================================
# ТЕСТЫ ПРЕДИКАТОВ
# =============================================================================


class TestIsFinite:
    """Тесты для is_finite"""

    def test_regular_values(self) -> None:
        """Обычные значения конечны"""
        assert is_finite(0.0)
        assert is_finite(-1e300)
        assert is_finite(5e-324)

    def test_nan_and_inf(self) -> None:
        """NaN и ±Inf не конечны"""
        assert not is_finite(float("nan"))
        assert not is_finite(math.inf)
        assert not is_finite(-math.inf)

    def test_int_beyond_float_range(self) -> None:
        """int, не представимый float, не конечен и не ноль"""
        assert is_finite(10**300)
        assert not is_finite(10**400)
        assert not is_zero(10**400)
        with pytest.raises(NonFiniteValueError, match="out of float range"):
            require_finite(10**400, "scalar")

    def test_require_finite(self) -> None:
        """require_finite возвращает значение или бросает NonFiniteValueError"""
        assert require_finite(2.5) == 2.5
        with pytest.raises(NonFiniteValueError, match="scalar must be finite"):
            require_finite(math.inf, "scalar")


class TestIsZero:
    """Тесты для is_zero"""

    def test_default_epsilon(self) -> None:
        """Значения строго внутри (-eps, eps) — ноль"""
        assert is_zero(0.0)
        assert is_zero(-0.0)
        assert is_zero(1e-13)
        assert is_zero(-1e-13)

    def test_boundary_is_not_zero(self) -> None:
        """Ровно ±eps — уже не ноль (строгие неравенства)"""
        assert not is_zero(EPS_DEFAULT)
        assert not is_zero(-EPS_DEFAULT)

    def test_non_finite_never_zero(self) -> None:
        """NaN/Inf никогда не считаются нулём"""
        assert not is_zero(float("nan"))
        assert not is_zero(math.inf)
        assert not is_zero(-math.inf)

    def test_explicit_eps(self) -> None:
        """Явный eps перекрывает контекст"""
        assert is_zero(1e-7, eps=1e-6)
        assert not is_zero(1e-5, eps=1e-6)
        assert not is_zero(float("nan"), eps=1.0)


# =============================================================================
# ТЕСТЫ КОНТЕКСТА
# =============================================================================


class TestNumericContext:
    """Тесты для NumericContext и set_epsilon/get_epsilon"""

    def test_default_context(self) -> None:
        """Контекст по умолчанию использует EPS_DEFAULT"""
        assert DEFAULT_CONTEXT.epsilon == EPS_DEFAULT
        assert get_epsilon() == 1e-12

    def test_floor_is_smallest_positive_float(self) -> None:
        """Нижняя граница — наименьший положительный float"""
        assert EPS_FLOOR == 5e-324
        assert NumericContext(EPS_FLOOR).epsilon == EPS_FLOOR

    def test_below_floor_rejected(self) -> None:
        """epsilon ниже floor → OutOfRangeError"""
        with pytest.raises(OutOfRangeError):
            NumericContext(0.0)
        with pytest.raises(OutOfRangeError):
            NumericContext(-1e-6)

    def test_non_finite_rejected(self) -> None:
        """NaN/±Inf epsilon → OutOfRangeError, как и значение ниже floor"""
        with pytest.raises(OutOfRangeError):
            NumericContext(float("nan"))
        with pytest.raises(OutOfRangeError):
            NumericContext(math.inf)
        with pytest.raises(OutOfRangeError):
            NumericContext(-math.inf)

    def test_context_is_immutable(self) -> None:
        """Контекст — immutable value object"""
        context = NumericContext(1e-6)
        with pytest.raises(AttributeError):
            context.epsilon = 1.0  # type: ignore[misc]

    def test_set_epsilon_changes_all_decisions(self) -> None:
        """set_epsilon влияет на is_zero и is_zero_matrix"""
        matrix = Matrix.create_diagonal(1e-9, 1e-9)
        assert not is_zero(1e-9)
        assert not matrix.is_zero_matrix()

        set_epsilon(1e-6)

        assert get_epsilon() == 1e-6
        assert is_zero(1e-9)
        assert matrix.is_zero_matrix()

    def test_failed_set_keeps_previous_value(self) -> None:
        """Невалидный epsilon не изменяет текущий"""
        set_epsilon(1e-8)
        with pytest.raises(OutOfRangeError):
            set_epsilon(0.0)
        with pytest.raises(OutOfRangeError):
            set_epsilon(float("nan"))
        with pytest.raises(OutOfRangeError):
            set_epsilon(math.inf)
        assert get_epsilon() == 1e-8


class TestLocalEpsilon:
    """Тесты для local_epsilon"""

    def test_scoped_value(self) -> None:
        """epsilon действует только внутри блока"""
        with local_epsilon(1e-6) as context:
            assert context.epsilon == 1e-6
            assert get_context() is context
            assert is_zero(1e-9)
        assert get_epsilon() == EPS_DEFAULT
        assert not is_zero(1e-9)

    def test_restored_after_exception(self) -> None:
        """Контекст восстанавливается при исключении"""
        with pytest.raises(RuntimeError):
            with local_epsilon(1e-3):
                raise RuntimeError("boom")
        assert get_epsilon() == EPS_DEFAULT

    def test_nested(self) -> None:
        """Вложенные блоки восстанавливают внешний epsilon"""
        with local_epsilon(1e-6):
            with local_epsilon(1e-3):
                assert get_epsilon() == 1e-3
            assert get_epsilon() == 1e-6

    def test_invalid_value(self) -> None:
        """Невалидный epsilon отклоняется до входа в блок"""
        with pytest.raises(OutOfRangeError):
            with local_epsilon(0.0):
                pass  # pragma: no cover
        assert get_epsilon() == EPS_DEFAULT


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestValidatePositiveInt:
    """Тесты для validate_positive_int"""

    def test_valid(self) -> None:
        validate_positive_int(1, "rows")
        validate_positive_int(100, "rows")

    def test_non_positive(self) -> None:
        with pytest.raises(InvalidArgumentError, match="rows must be positive"):
            validate_positive_int(0, "rows")
        with pytest.raises(InvalidArgumentError):
            validate_positive_int(-3, "rows")

    def test_wrong_type(self) -> None:
        with pytest.raises(InvalidArgumentError, match="must be an int"):
            validate_positive_int(2.0, "rows")  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError):
            validate_positive_int(True, "rows")
