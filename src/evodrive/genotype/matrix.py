"""
Dense Matrix Module

This module implements the Matrix class, the dense 2-D buffer from which every
network weight block is built. A Matrix wraps a float64 numpy array and adds the
shape contract used throughout the package: operations on two matrices check that
their dimensions are compatible and raise DimensionMismatch instead of relying on
numpy broadcasting (which would silently stretch a row into a block).

Matrices behave as values: every operation, including mutate(), returns a new
Matrix and leaves the receiver untouched. Cells are only changed in place through
explicit item assignment.

Classes:
    Matrix: Dense real-valued matrix with algebraic and mutation operations
"""

import numpy as np

from evodrive.exceptions import DimensionMismatch

class Matrix:
    """
    A dense rows x cols matrix of real numbers.

    Public Properties:
        rows:  Number of rows
        cols:  Number of columns
        shape: (rows, cols)

    Public Methods:
        multiply(other):   Matrix product, self.cols must equal other.rows
        add_scalar(value): Add a scalar to every cell
        pointwise_tanh():  Hyperbolic tangent of every cell
        difference(other): Cellwise subtraction, shapes must be equal
        mutate():          Perturb a few random cells, clamped to [-1, 1]
        copy():            Deep copy
        to_list():         Nested lists of floats, row by row
    """

    # The number of cells touched by mutate() is rows*cols divided by this
    # coefficient (at least one). Lower values mean denser mutations.
    MUTATION_COEFFICIENT = 7

    def __init__(self, rows: int, cols: int, data=None):
        """
        Create a matrix of the given shape.

        Parameters:
            rows: Number of rows, must be positive
            cols: Number of columns, must be positive
            data: Optional initial cell values (anything numpy can turn into a
                  rows x cols array); the values are copied. Zeros if omitted.
        """
        if rows < 1 or cols < 1:
            raise DimensionMismatch(f"Matrix dimensions must be positive, got {rows}x{cols}")

        if data is None:
            self._data = np.zeros((rows, cols), dtype=np.float64)
        else:
            array = np.array(data, dtype=np.float64)
            if array.shape != (rows, cols):
                raise DimensionMismatch(f"Expected {rows}x{cols} data, got shape {array.shape}")
            self._data = array

    @classmethod
    def from_rows(cls, rows: list[list[float]]) -> 'Matrix':
        """
        Build a matrix from a nested sequence, inferring its shape.
        All rows must have the same length.
        """
        if len(rows) == 0 or len(rows[0]) == 0:
            raise DimensionMismatch("Cannot infer the shape of an empty matrix")
        num_cols = len(rows[0])
        for row in rows:
            if len(row) != num_cols:
                raise DimensionMismatch(f"Ragged rows: expected {num_cols} columns, got {len(row)}")
        return cls(len(rows), num_cols, rows)

    @classmethod
    def random(cls, rows: int, cols: int) -> 'Matrix':
        """
        Create a matrix with every cell drawn uniformly from [-1, 1].
        """
        return cls(rows, cols, np.random.uniform(-1.0, 1.0, size=(rows, cols)))

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        self._check_index(row, col)
        return float(self._data[row, col])

    def __setitem__(self, index: tuple[int, int], value: float):
        row, col = index
        self._check_index(row, col)
        self._data[row, col] = value

    def _check_index(self, row: int, col: int):
        # Reject negative indices, numpy would otherwise wrap them around
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Cell ({row}, {col}) outside {self.rows}x{self.cols} matrix")

    def multiply(self, other: 'Matrix') -> 'Matrix':
        """
        Matrix product self x other.

        Raises:
            DimensionMismatch: if self.cols != other.rows
        """
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"Cannot multiply {self.rows}x{self.cols} by {other.rows}x{other.cols}: "
                f"the columns count of A must be equal to the rows count of B")
        return Matrix(self.rows, other.cols, np.dot(self._data, other._data))

    def add_scalar(self, value: float) -> 'Matrix':
        """
        Add 'value' to every cell.
        """
        return Matrix(self.rows, self.cols, self._data + value)

    def pointwise_tanh(self) -> 'Matrix':
        """
        Apply the hyperbolic tangent to every cell.
        """
        return Matrix(self.rows, self.cols, np.tanh(self._data))

    def difference(self, other: 'Matrix') -> 'Matrix':
        """
        Cellwise self - other.

        Raises:
            DimensionMismatch: if the two shapes differ
        """
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Cannot subtract {other.rows}x{other.cols} from {self.rows}x{self.cols}")
        return Matrix(self.rows, self.cols, self._data - other._data)

    def __matmul__(self, other: 'Matrix') -> 'Matrix':
        return self.multiply(other)

    def __add__(self, value: float) -> 'Matrix':
        if isinstance(value, Matrix):
            return NotImplemented
        return self.add_scalar(value)

    def __sub__(self, other: 'Matrix') -> 'Matrix':
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.difference(other)

    @classmethod
    def mutation_points(cls, rows: int, cols: int, coefficient: float | None = None) -> int:
        """
        Number of cells mutate() perturbs for a matrix of the given shape.
        """
        if coefficient is None:
            coefficient = cls.MUTATION_COEFFICIENT
        return max(1, round(rows * cols / coefficient))

    def mutate(self, coefficient: float | None = None) -> 'Matrix':
        """
        Return a mutated copy of this matrix.

        Picks mutation_points() random cells (with repetition) and adds a uniform
        perturbation in [-1, 1] to each, clamping the result to [-1, 1]. The
        receiver is not modified; callers replace it with the returned matrix.

        Parameters:
            coefficient: Overrides MUTATION_COEFFICIENT for this call
        """
        mutated = self.copy()
        for _ in range(Matrix.mutation_points(self.rows, self.cols, coefficient)):
            row   = np.random.randint(self.rows)
            col   = np.random.randint(self.cols)
            value = mutated._data[row, col] + np.random.uniform(-1.0, 1.0)
            mutated._data[row, col] = min(1.0, max(-1.0, value))
        return mutated

    def copy(self) -> 'Matrix':
        return Matrix(self.rows, self.cols, self._data)

    def to_list(self) -> list[list[float]]:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        """
        A copy of the underlying array.
        """
        return self._data.copy()

    def sum(self) -> float:
        return float(self._data.sum())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __str__(self):
        return '\n'.join(', '.join(str(cell) for cell in row) for row in self._data.tolist())

    def __repr__(self):
        return f"Matrix(rows={self.rows}, cols={self.cols})"
