"""
Exceptions — таксономия ошибок линейной алгебры

Каждая ошибка наследует LinearAlgebraError и ближайшее builtin-исключение,
чтобы вызывающий код мог ловить как конкретный вид, так и общий ValueError /
ArithmeticError / IndexError.

Все операции ядра падают сразу, в точке нарушения, до любой записи
в видимое состояние.
"""


class LinearAlgebraError(Exception):
    """Базовая ошибка ядра Matrix/ColumnVector."""


class InvalidArgumentError(LinearAlgebraError, ValueError):
    """Неположительная размерность или отсутствующий (None) аргумент."""


class OutOfRangeError(LinearAlgebraError, ValueError):
    """Значение вне допустимого диапазона (epsilon ниже floor, отрицательный p нормы)."""


class IndexOutOfRangeError(OutOfRangeError, IndexError):
    """1-based индекс вне [1, rows] / [1, columns]."""


class ShapeMismatchError(LinearAlgebraError, ValueError):
    """Размерности операндов несовместимы с операцией."""


class NonFiniteValueError(LinearAlgebraError, ValueError):
    """Операнд или элемент результата равен NaN или ±Inf."""


class MatrixArithmeticError(LinearAlgebraError, ArithmeticError):
    """Операция математически не определена для данных операндов."""


class DivisionByZeroError(MatrixArithmeticError, ZeroDivisionError):
    """Деление матрицы на скаляр, близкий к нулю."""


class SingularMatrixError(MatrixArithmeticError):
    """Обращение матрицы с нулевым определителем."""


class MatrixFormatError(LinearAlgebraError, ValueError):
    """Текст не разбирается в матрицу/вектор ожидаемой формы."""
