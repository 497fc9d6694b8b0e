"""
Matrix — плотная матрица вещественных чисел

Классическая (не итерационная) линейная алгебра для малых матриц:
- Поэлементная арифметика, умножение матриц, транспонирование
- Определитель разложением Лапласа по первой строке (O(n!))
- Обратная матрица методом присоединённой матрицы (adjugate)
- Ранг перебором смежных квадратных подматриц убывающего размера

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Внешние индексы 1-based, внутреннее хранение 0-based
2. Каждый хранимый элемент конечен (NaN/Inf отклоняются при записи)
3. Форма неизменна после создания; изменение только поэлементное
4. Операции не изменяют операнды: результат строится в новом объекте
5. Равенство и hash определены через канонический текст (FLOAT_TEXT_PRECISION)

Канонический текст: "<rows>,<columns>:<e11>,...,<e1c>;<e21>,...;...;"

Экспоненциальная сложность determinant()/rank() принята сознательно:
ядро обслуживает векторы и матрицы размерности 3-4.
"""

import numbers
from typing import TYPE_CHECKING, Final, List, Optional, Sequence

from pose_compressor.core.math.exceptions import (
    DivisionByZeroError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    LinearAlgebraError,
    MatrixFormatError,
    NonFiniteValueError,
    ShapeMismatchError,
    SingularMatrixError,
)
from pose_compressor.core.math.numerical_safeguards import (
    get_context,
    is_finite,
    require_finite,
    validate_positive_int,
)

if TYPE_CHECKING:
    from pose_compressor.core.math.column_vector import ColumnVector

# =============================================================================
# КАНОНИЧЕСКИЙ ФОРМАТ
# =============================================================================

# Значащие цифры float в каноническом тексте (гарантированная десятичная точность double)
FLOAT_TEXT_PRECISION: Final[int] = 15

HEADER_SEPARATOR: Final[str] = ":"
SHAPE_SEPARATOR: Final[str] = ","
ELEMENT_SEPARATOR: Final[str] = ","
ROW_TERMINATOR: Final[str] = ";"


def format_element(value: float) -> str:
    """
    Каноническое представление элемента.

    Examples:
        >>> format_element(1.0)
        '1'
        >>> format_element(-0.0)
        '0'
        >>> format_element(0.1 + 0.2)
        '0.3'
    """
    if value == 0:
        return "0"
    return format(value, f".{FLOAT_TEXT_PRECISION}g")


# =============================================================================
# ВНУТРЕННИЕ АЛГОРИТМЫ (0-based)
# =============================================================================


def _minor(data: List[List[float]], row: int, column: int) -> List[List[float]]:
    """Копия data без строки row и столбца column."""
    return [
        [value for j, value in enumerate(line) if j != column]
        for i, line in enumerate(data)
        if i != row
    ]


def _determinant(data: List[List[float]]) -> float:
    """Разложение Лапласа по первой строке: det = Σ (-1)^j · a[0][j] · det(M[0][j])."""
    if len(data) == 1:
        return data[0][0]

    result = 0.0
    for j, element in enumerate(data[0]):
        sign = 1.0 if j % 2 == 0 else -1.0
        result += sign * element * _determinant(_minor(data, 0, j))
    return result


def _require_operand(value: object, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None")


# =============================================================================
# MATRIX
# =============================================================================


class Matrix:
    """
    Плотная матрица rows × columns.

    Создаётся заполненной нулями. Доступ к элементам 1-based:

        >>> m = Matrix(2, 2)
        >>> m[1, 2] = 5.0
        >>> m[1, 2]
        5.0
        >>> str(m)
        '2,2:0,5;0,0;'

    m[j] с одним индексом возвращает j-й столбец как ColumnVector.
    """

    __slots__ = ("_rows", "_columns", "_data")

    def __init__(self, rows: int, columns: int) -> None:
        validate_positive_int(rows, "rows")
        validate_positive_int(columns, "columns")
        self._rows = rows
        self._columns = columns
        self._data: List[List[float]] = [[0.0] * columns for _ in range(rows)]

    @classmethod
    def _from_data(cls, data: List[List[float]]) -> "Matrix":
        """
        Сборка результата операции из 0-based строк.

        Проверяет конечность каждого элемента до создания объекта.
        """
        for line in data:
            for value in line:
                if not is_finite(value):
                    raise NonFiniteValueError(f"result element is not finite: {value}")
        result = Matrix.__new__(Matrix)
        result._rows = len(data)
        result._columns = len(data[0])
        result._data = data
        return result

    def _wrap(self, result: "Matrix") -> "Matrix":
        """Упаковка поэлементного результата в тип self (переопределяется в ColumnVector)."""
        return result

    # -------------------------------------------------------------------------
    # Форма
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._columns)

    def is_square(self) -> bool:
        return self._rows == self._columns

    def is_homomorphic(self, other: "Matrix") -> bool:
        """
        Проверка совпадения формы (rows и columns).

        Raises:
            InvalidArgumentError: Если other равен None
        """
        _require_operand(other, "other")
        return self._rows == other._rows and self._columns == other._columns

    def is_zero_matrix(self) -> bool:
        """True если каждый элемент проходит is_zero активного контекста."""
        context = get_context()
        return all(context.is_zero(value) for line in self._data for value in line)

    # -------------------------------------------------------------------------
    # Доступ к элементам
    # -------------------------------------------------------------------------

    def _check_index(self, index: int, bound: int, name: str) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgumentError(f"{name} must be an int, got {type(index).__name__}")
        if index < 1 or index > bound:
            raise IndexOutOfRangeError(f"{name} {index} out of range [1, {bound}]")
        return index - 1

    def get(self, row: int, column: int) -> float:
        """
        Элемент (row, column), индексы 1-based.

        Raises:
            IndexOutOfRangeError: Если индекс вне [1, rows] / [1, columns]
        """
        i = self._check_index(row, self._rows, "row")
        j = self._check_index(column, self._columns, "column")
        return self._data[i][j]

    def set(self, row: int, column: int, value: float) -> None:
        """
        Запись элемента (row, column), индексы 1-based.

        Raises:
            IndexOutOfRangeError: Если индекс вне диапазона
            NonFiniteValueError: Если value равен NaN или ±Inf
        """
        i = self._check_index(row, self._rows, "row")
        j = self._check_index(column, self._columns, "column")
        self._data[i][j] = float(require_finite(value, "value"))

    def get_column(self, column: int) -> "ColumnVector":
        """Столбец column как новый ColumnVector."""
        from pose_compressor.core.math.column_vector import ColumnVector

        j = self._check_index(column, self._columns, "column")
        result = ColumnVector(self._rows)
        for i in range(self._rows):
            result._data[i][0] = self._data[i][j]
        return result

    def set_column(self, column: int, vector: "Matrix") -> None:
        """
        Перезапись столбца column значениями vector.

        Raises:
            InvalidArgumentError: Если vector равен None
            ShapeMismatchError: Если vector не rows × 1
        """
        j = self._check_index(column, self._columns, "column")
        _require_operand(vector, "vector")
        if vector._columns != 1 or vector._rows != self._rows:
            raise ShapeMismatchError(
                f"column must be {self._rows}x1, got {vector._rows}x{vector._columns}"
            )
        for i in range(self._rows):
            self._data[i][j] = vector._data[i][0]

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get_column(key)

    def __setitem__(self, key, value) -> None:
        if isinstance(key, tuple):
            self.set(*key, value)
        else:
            self.set_column(key, value)

    def to_rows(self) -> List[List[float]]:
        """Копия элементов как список строк."""
        return [list(line) for line in self._data]

    def clone(self) -> "Matrix":
        """Независимая копия без общих данных."""
        return self._wrap(Matrix._from_data(self.to_rows()))

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def _elementwise(self, other: "Matrix", sign: float) -> "Matrix":
        _require_operand(other, "other")
        if not self.is_homomorphic(other):
            raise ShapeMismatchError(
                f"operands must have the same shape: {self.shape} vs {other.shape}"
            )
        data = [
            [a + sign * b for a, b in zip(line_a, line_b)]
            for line_a, line_b in zip(self._data, other._data)
        ]
        return self._wrap(Matrix._from_data(data))

    def _scale(self, number: float) -> "Matrix":
        require_finite(number, "scalar")
        data = [[value * number for value in line] for line in self._data]
        return self._wrap(Matrix._from_data(data))

    def _matmul(self, other: "Matrix") -> "Matrix":
        if self._columns != other._rows:
            raise ShapeMismatchError(
                f"cannot multiply {self._rows}x{self._columns} by {other._rows}x{other._columns}"
            )
        data = [
            [
                sum(line[k] * other._data[k][j] for k in range(self._columns))
                for j in range(other._columns)
            ]
            for line in self._data
        ]
        return Matrix._from_data(data)

    def __add__(self, other: "Matrix") -> "Matrix":
        if other is not None and not isinstance(other, Matrix):
            return NotImplemented
        return self._elementwise(other, 1.0)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if other is not None and not isinstance(other, Matrix):
            return NotImplemented
        return self._elementwise(other, -1.0)

    def __neg__(self) -> "Matrix":
        return self._scale(-1.0)

    def __mul__(self, other):
        _require_operand(other, "other")
        if isinstance(other, Matrix):
            return self._matmul(other)
        if isinstance(other, numbers.Real):
            return self._scale(other)
        return NotImplemented

    def __rmul__(self, other):
        _require_operand(other, "other")
        if isinstance(other, numbers.Real):
            return self._scale(other)
        return NotImplemented

    def __matmul__(self, other: "Matrix") -> "Matrix":
        _require_operand(other, "other")
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._matmul(other)

    def __truediv__(self, number: float) -> "Matrix":
        """
        Деление каждого элемента на скаляр.

        Raises:
            DivisionByZeroError: Если number близок к нулю (is_zero)
            NonFiniteValueError: Если number равен NaN или ±Inf
        """
        _require_operand(number, "number")
        if not isinstance(number, numbers.Real):
            return NotImplemented
        if get_context().is_zero(number):
            raise DivisionByZeroError(f"division by near-zero scalar {number}")
        require_finite(number, "scalar")
        data = [[value / number for value in line] for line in self._data]
        return self._wrap(Matrix._from_data(data))

    # -------------------------------------------------------------------------
    # Структурные операции
    # -------------------------------------------------------------------------

    def transpose(self) -> "Matrix":
        return Matrix._from_data([list(column) for column in zip(*self._data)])

    def cofactor(self, row: int, column: int) -> "Matrix":
        """
        Матрица без строки row и столбца column (для миноров).

        Raises:
            ShapeMismatchError: Если матрица 1 × n или n × 1
            IndexOutOfRangeError: Если row/column вне диапазона
        """
        if self._rows < 2 or self._columns < 2:
            raise ShapeMismatchError(f"cofactor requires at least 2x2, got {self.shape}")
        i = self._check_index(row, self._rows, "row")
        j = self._check_index(column, self._columns, "column")
        return Matrix._from_data(_minor(self._data, i, j))

    def submatrix(self, top: int, bottom: int, left: int, right: int) -> "Matrix":
        """
        Замкнутый прямоугольный блок [top..bottom] × [left..right].

        Raises:
            IndexOutOfRangeError: Если граница вне матрицы
            InvalidArgumentError: Если top >= bottom или left >= right
        """
        self._check_index(top, self._rows, "top")
        self._check_index(bottom, self._rows, "bottom")
        self._check_index(left, self._columns, "left")
        self._check_index(right, self._columns, "right")
        if top >= bottom:
            raise InvalidArgumentError(f"top ({top}) must be less than bottom ({bottom})")
        if left >= right:
            raise InvalidArgumentError(f"left ({left}) must be less than right ({right})")
        data = [line[left - 1 : right] for line in self._data[top - 1 : bottom]]
        return Matrix._from_data(data)

    def determinant(self) -> float:
        """
        Определитель разложением Лапласа по первой строке.

        Raises:
            ShapeMismatchError: Если матрица не квадратная
        """
        if not self.is_square():
            raise ShapeMismatchError(f"determinant requires a square matrix, got {self.shape}")
        return _determinant(self._data)

    def inverse(self) -> "Matrix":
        """
        Обратная матрица методом присоединённой матрицы.

        result[j][i] = (-1)^(i+j) · det(M[i][j]) / det(A)

        Raises:
            ShapeMismatchError: Если матрица не квадратная
            SingularMatrixError: Если определитель близок к нулю
        """
        determinant = self.determinant()
        if get_context().is_zero(determinant):
            raise SingularMatrixError(f"matrix is singular (determinant {determinant})")

        n = self._rows
        if n == 1:
            adjugate = [[1.0]]
        else:
            adjugate = [[0.0] * n for _ in range(n)]
            for i in range(n):
                for j in range(n):
                    sign = 1.0 if (i + j) % 2 == 0 else -1.0
                    adjugate[j][i] = sign * _determinant(_minor(self._data, i, j))
        return Matrix._from_data(adjugate) / determinant

    def rank(self) -> int:
        """
        Ранг перебором смежных квадратных блоков убывающего размера.

        Возвращает наибольший size, для которого найден блок size × size
        с ненулевым определителем; 0 для нулевой матрицы.
        """
        context = get_context()
        size = min(self._rows, self._columns)
        while size > 0:
            for top in range(self._rows - size + 1):
                for left in range(self._columns - size + 1):
                    block = [line[left : left + size] for line in self._data[top : top + size]]
                    if not context.is_zero(_determinant(block)):
                        return size
            size -= 1
        return 0

    def trace(self) -> float:
        """
        Сумма диагональных элементов.

        Raises:
            ShapeMismatchError: Если матрица не квадратная
        """
        if not self.is_square():
            raise ShapeMismatchError(f"trace requires a square matrix, got {self.shape}")
        return sum(self._data[i][i] for i in range(self._rows))

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def create_diagonal(cls, *values: float) -> "Matrix":
        """
        Квадратная матрица с values на диагонали.

        Raises:
            InvalidArgumentError: Если values пуст или равен None
            NonFiniteValueError: Если значение не конечно
        """
        if len(values) == 1 and values[0] is None:
            raise InvalidArgumentError("values must not be None")
        if not values:
            raise InvalidArgumentError("at least one diagonal value is required")
        result = Matrix(len(values), len(values))
        for i, value in enumerate(values, start=1):
            result.set(i, i, value)
        return result

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """
        Матрица из списка строк.

        Raises:
            InvalidArgumentError: Если rows пуст или равен None
            ShapeMismatchError: Если строки разной длины
        """
        _require_operand(rows, "rows")
        if not rows or not rows[0]:
            raise InvalidArgumentError("rows must not be empty")
        width = len(rows[0])
        if any(len(line) != width for line in rows):
            raise ShapeMismatchError("all rows must have the same length")
        result = Matrix(len(rows), width)
        for i, line in enumerate(rows, start=1):
            for j, value in enumerate(line, start=1):
                result.set(i, j, value)
        return result

    # -------------------------------------------------------------------------
    # Текст, равенство, hash
    # -------------------------------------------------------------------------

    def to_text(self) -> str:
        """Канонический текст матрицы."""
        parts = [f"{self._rows}{SHAPE_SEPARATOR}{self._columns}{HEADER_SEPARATOR}"]
        for line in self._data:
            parts.append(ELEMENT_SEPARATOR.join(format_element(value) for value in line))
            parts.append(ROW_TERMINATOR)
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"{type(self).__name__}.parse({self.to_text()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.to_text() == other.to_text()

    def __hash__(self) -> int:
        return hash(self.to_text())

    @classmethod
    def _parse_matrix(cls, text: str) -> "Matrix":
        header, separator, body = text.partition(HEADER_SEPARATOR)
        if not separator:
            raise MatrixFormatError(f"missing '{HEADER_SEPARATOR}' after shape: {text!r}")

        shape = header.split(SHAPE_SEPARATOR)
        if len(shape) != 2:
            raise MatrixFormatError(f"shape must be '<rows>,<columns>': {header!r}")

        try:
            result = Matrix(int(shape[0]), int(shape[1]))
            lines = body.split(ROW_TERMINATOR)
            if lines[-1].strip():
                raise MatrixFormatError(f"row not terminated by '{ROW_TERMINATOR}'")
            lines = lines[:-1]
            if len(lines) != result.rows:
                raise MatrixFormatError(f"expected {result.rows} rows, got {len(lines)}")
            for i, line in enumerate(lines, start=1):
                elements = line.split(ELEMENT_SEPARATOR)
                if len(elements) != result.columns:
                    raise MatrixFormatError(
                        f"row {i}: expected {result.columns} elements, got {len(elements)}"
                    )
                for j, element in enumerate(elements, start=1):
                    result.set(i, j, float(element))
        except MatrixFormatError:
            raise
        except (ValueError, LinearAlgebraError) as exc:
            raise MatrixFormatError(f"cannot parse matrix from {text!r}: {exc}") from exc
        return result

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Matrix"]:
        """
        Разбор канонического текста.

        Args:
            text: Текст вида "2,2:1,0;0,1;"

        Returns:
            Новая матрица, либо None для пустого/отсутствующего текста

        Raises:
            MatrixFormatError: Если текст не разбирается
        """
        if text is None or not text.strip():
            return None
        return cls._parse_matrix(text.strip())
