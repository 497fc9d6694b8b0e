"""
Core math modules для pose_compressor

Скалярные предикаты, контекст толерантности и плотные Matrix/ColumnVector.
"""

# Numerical Safeguards
from pose_compressor.core.math.numerical_safeguards import (
    # Epsilon constants
    DEFAULT_CONTEXT,
    EPS_DEFAULT,
    EPS_FLOOR,
    # Context
    NumericContext,
    get_context,
    get_epsilon,
    local_epsilon,
    set_epsilon,
    # Predicates
    is_finite,
    is_zero,
    require_finite,
)

# Exceptions
from pose_compressor.core.math.exceptions import (
    DivisionByZeroError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    LinearAlgebraError,
    MatrixArithmeticError,
    MatrixFormatError,
    NonFiniteValueError,
    OutOfRangeError,
    ShapeMismatchError,
    SingularMatrixError,
)

# Matrix / ColumnVector
from pose_compressor.core.math.matrix import FLOAT_TEXT_PRECISION, Matrix, format_element
from pose_compressor.core.math.column_vector import ColumnVector, dot

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "DEFAULT_CONTEXT",
    "EPS_DEFAULT",
    "EPS_FLOOR",
    # Numerical Safeguards: Context
    "NumericContext",
    "get_context",
    "get_epsilon",
    "local_epsilon",
    "set_epsilon",
    # Numerical Safeguards: Predicates
    "is_finite",
    "is_zero",
    "require_finite",
    # Exceptions
    "LinearAlgebraError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "IndexOutOfRangeError",
    "ShapeMismatchError",
    "NonFiniteValueError",
    "MatrixArithmeticError",
    "DivisionByZeroError",
    "SingularMatrixError",
    "MatrixFormatError",
    # Matrix
    "FLOAT_TEXT_PRECISION",
    "Matrix",
    "format_element",
    # ColumnVector
    "ColumnVector",
    "dot",
]
