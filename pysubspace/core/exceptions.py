"""
Exception hierarchy for PySubspace.

All exceptions inherit from PySubspaceError to allow catching any
library-specific error. Two families matter to callers:

    ValidationError  precondition violations, raised before any backend call
    NumericalError   the linear-algebra backend reported a failure status

Both indicate a bug in the calling code or a degenerate input the caller
must prevent. Nothing in the engine retries or degrades gracefully; see
pysubspace.core.result for the abort policy used by applications.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PySubspaceError(Exception):
    """Base exception for all PySubspace errors."""
    pass


class ValidationError(PySubspaceError):
    """
    A precondition of a matrix operation was violated.

    Raised when inputs fail validation checks: non-square input to a
    square-only operation, non-vector input to a vector-only operation,
    or use of a released matrix.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix dimensions are incorrect or inconsistent.

    Raised when operand shapes don't match, e.g. adding a 3x2 matrix to
    a 2x3 matrix or multiplying with mismatched inner dimensions.
    """
    pass


class IndexRangeError(ValidationError):
    """
    A row/column index or half-open range is out of bounds.

    Attributes:
        index: The offending index (or range start)
        bound: The exclusive upper bound that applied
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        bound: int | None = None,
    ):
        super().__init__(message)
        self.index = index
        self.bound = bound


class FormatError(PySubspaceError):
    """
    Serialized matrix data is malformed or truncated.

    Attributes:
        expected: Number of values or bytes expected
        actual: Number of values or bytes found
    """

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NumericalError(PySubspaceError):
    """
    The linear-algebra backend reported a non-success status.

    Base class for failures detected after a kernel call.

    Attributes:
        routine: Backend routine that failed (e.g. 'getrf', 'syevd')
        info: Status code reported by the backend, if any
    """

    def __init__(
        self,
        message: str,
        routine: str | None = None,
        info: int | None = None,
    ):
        super().__init__(message)
        self.routine = routine
        self.info = info


class SingularMatrixError(NumericalError):
    """
    Matrix is singular.

    Raised when LU factorization finds an exactly zero pivot, so the
    explicit inverse does not exist.

    Attributes:
        matrix_name: Label of the problematic matrix
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        routine: str | None = None,
        info: int | None = None,
    ):
        super().__init__(message, routine=routine, info=info)
        self.matrix_name = matrix_name


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised by the generalized eigensolver when the right-hand matrix B
    cannot be Cholesky-factored.

    Attributes:
        matrix_name: Label of the problematic matrix
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        routine: str | None = None,
        info: int | None = None,
    ):
        super().__init__(message, routine=routine, info=info)
        self.matrix_name = matrix_name


class ConvergenceError(NumericalError):
    """
    An iterative backend kernel failed to converge.

    Raised when a symmetric eigensolver reports that off-diagonal
    elements of an intermediate tridiagonal form did not converge.
    """
    pass
