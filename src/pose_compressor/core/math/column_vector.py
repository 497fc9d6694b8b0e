"""
ColumnVector — вектор-столбец (Matrix с columns == 1)

Добавляет к Matrix:
- Индексацию одним 1-based индексом: v[i] == v[i, 1]
- Скалярное и векторное (только 3-D) произведения
- p-нормы, нормализацию и угол между векторами

Угол — основа сегментации и сравнения поз: равные (по каноническому тексту)
векторы дают ровно 0 без вычисления acos.
"""

import math
import numbers
from typing import Iterator, List, Optional

from pose_compressor.core.math.exceptions import (
    InvalidArgumentError,
    MatrixArithmeticError,
    MatrixFormatError,
    NonFiniteValueError,
    OutOfRangeError,
    ShapeMismatchError,
)
from pose_compressor.core.math.matrix import Matrix, _require_operand
from pose_compressor.core.math.numerical_safeguards import get_context, require_finite


class ColumnVector(Matrix):
    """
    Вектор-столбец длины rows.

        >>> v = ColumnVector.create(3.0, 4.0)
        >>> v[2]
        4.0
        >>> v.norm(2)
        5.0
    """

    __slots__ = ()

    def __init__(self, rows: int) -> None:
        super().__init__(rows, 1)

    @classmethod
    def from_matrix(cls, matrix: Matrix) -> "ColumnVector":
        """
        Копия матрицы rows × 1 как ColumnVector.

        Raises:
            ShapeMismatchError: Если columns != 1
        """
        _require_operand(matrix, "matrix")
        if matrix.columns != 1:
            raise ShapeMismatchError(f"vector must have one column, got {matrix.columns}")
        result = cls(matrix.rows)
        for i in range(matrix.rows):
            result._data[i][0] = matrix._data[i][0]
        return result

    @classmethod
    def create(cls, *values: float) -> "ColumnVector":
        """
        Вектор из упорядоченного списка значений.

        Raises:
            InvalidArgumentError: Если values пуст или равен None
            NonFiniteValueError: Если значение не конечно
        """
        if len(values) == 1 and values[0] is None:
            raise InvalidArgumentError("values must not be None")
        if not values:
            raise InvalidArgumentError("at least one value is required")
        result = cls(len(values))
        for i, value in enumerate(values, start=1):
            result.set(i, 1, value)
        return result

    def _wrap(self, result: Matrix) -> "ColumnVector":
        return ColumnVector.from_matrix(result)

    # -------------------------------------------------------------------------
    # Доступ
    # -------------------------------------------------------------------------

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get(key, 1)

    def __setitem__(self, key, value) -> None:
        if isinstance(key, tuple):
            self.set(*key, value)
        else:
            self.set(key, 1, value)

    def __iter__(self) -> Iterator[float]:
        return (line[0] for line in self._data)

    def __len__(self) -> int:
        return self.rows

    def to_list(self) -> List[float]:
        return [line[0] for line in self._data]

    # -------------------------------------------------------------------------
    # Произведения
    # -------------------------------------------------------------------------

    def __mul__(self, other):
        # вектор * вектор: скалярное произведение
        if isinstance(other, ColumnVector):
            return self.dot(other)
        return super().__mul__(other)

    def dot(self, other: "ColumnVector") -> float:
        """
        Скалярное произведение Σ aᵢ·bᵢ.

        Raises:
            InvalidArgumentError: Если other равен None
            ShapeMismatchError: Если длины различаются
        """
        _require_operand(other, "other")
        if self.rows != other.rows or other.columns != 1:
            raise ShapeMismatchError(f"vector lengths differ: {self.rows} vs {other.rows}")
        return sum(a[0] * b[0] for a, b in zip(self._data, other._data))

    def cross_product(self, other: "ColumnVector") -> "ColumnVector":
        """
        Векторное произведение, определено только для 3-D.

        Raises:
            InvalidArgumentError: Если other равен None
            ShapeMismatchError: Если хотя бы один вектор не длины 3
        """
        _require_operand(other, "other")
        if self.rows != 3 or other.rows != 3:
            raise ShapeMismatchError(
                f"cross product requires two 3-D vectors, got {self.rows} and {other.rows}"
            )
        a1, a2, a3 = self.to_list()
        b1, b2, b3 = other.to_list()
        return ColumnVector.create(
            a2 * b3 - a3 * b2,
            a3 * b1 - a1 * b3,
            a1 * b2 - a2 * b1,
        )

    # -------------------------------------------------------------------------
    # Нормы и углы
    # -------------------------------------------------------------------------

    def norm(self, p: float = 2.0) -> float:
        """
        p-норма вектора.

        Args:
            p: Порядок нормы
                - math.inf: максимум модулей элементов
                - 0: число ненулевых (по is_zero) элементов
                - p > 0: (Σ|xᵢ|^p)^(1/p)

        Raises:
            OutOfRangeError: Если p < 0
            NonFiniteValueError: Если p равен NaN, либо норма не представима float
        """
        _require_operand(p, "p")
        if not isinstance(p, numbers.Real):
            raise InvalidArgumentError(f"p must be a real number, got {type(p).__name__}")
        if math.isnan(p):
            raise NonFiniteValueError("p must not be NaN")
        if p == math.inf:
            return max(abs(value) for value in self)
        if p < 0:
            raise OutOfRangeError(f"p must be non-negative, got {p}")
        if p == 0:
            context = get_context()
            return float(sum(1 for value in self if not context.is_zero(value)))
        try:
            result = sum(abs(value) ** p for value in self) ** (1.0 / p)
        except OverflowError as exc:
            raise NonFiniteValueError(f"{p}-norm is out of float range") from exc
        return require_finite(result, "norm")

    def normalize(self) -> "ColumnVector":
        """
        Единичный вектор того же направления: self / norm(2).

        Raises:
            DivisionByZeroError: Для нулевого вектора
        """
        return self / self.norm(2)

    def angle(self, other: "ColumnVector") -> float:
        """
        Угол между векторами в радианах, [0, π].

        Равные векторы (по контракту равенства Matrix) дают ровно 0.
        Угол к вектору нулевой длины не определён: результат NaN, так что
        сравнения с порогом (angle > t, angle < t) для него ложны.
        Косинус ограничивается [-1, 1], чтобы ошибка округления не выводила
        аргумент acos за область определения.

        Raises:
            InvalidArgumentError: Если other равен None
            ShapeMismatchError: Если формы различаются
            MatrixArithmeticError: Если оба вектора нулевые
        """
        _require_operand(other, "other")
        if not self.is_homomorphic(other):
            raise ShapeMismatchError(f"vector shapes differ: {self.shape} vs {other.shape}")
        if self.is_zero_matrix() and other.is_zero_matrix():
            raise MatrixArithmeticError("angle between two zero vectors is undefined")
        if self == other:
            return 0.0

        denominator = self.norm(2) * other.norm(2)
        if denominator == 0:
            return math.nan
        cosine = self.dot(other) / denominator
        return math.acos(max(-1.0, min(1.0, cosine)))

    # -------------------------------------------------------------------------
    # Текст
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["ColumnVector"]:
        """
        Разбор канонического текста вектора ("3,1:1;2;3;").

        Returns:
            Новый вектор, либо None для пустого/отсутствующего текста

        Raises:
            MatrixFormatError: Если текст не разбирается или columns != 1
        """
        matrix = Matrix.parse(text)
        if matrix is None:
            return None
        if matrix.columns != 1:
            raise MatrixFormatError(f"vector text must have one column, got {matrix.columns}")
        return cls.from_matrix(matrix)


def dot(a: ColumnVector, b: ColumnVector) -> float:
    """Скалярное произведение двух векторов."""
    _require_operand(a, "a")
    return a.dot(b)
