"""Exception types raised by the solvers."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .core import SolveResult


class FailureKind(Enum):
    """Kind of numerical degeneracy that stopped a solver."""

    ZERO_DERIVATIVE = "zero_derivative"
    ZERO_DENOMINATOR = "zero_denominator"
    SINGULAR_JACOBIAN = "singular_jacobian"
    UNDEFINED_EVALUATION = "undefined_evaluation"
    NON_FINITE_ITERATE = "non_finite_iterate"
    CANCELLED = "cancelled"


class SolverError(Exception):
    """Base exception for every solver failure."""


class InvalidBracketError(SolverError, ValueError):
    """Raised when a bracket does not satisfy the method's precondition.

    Bisection and Ridder need ``f(lo)`` and ``f(hi)`` of strictly opposite
    sign; every bracketing method needs two distinct finite endpoints.
    """

    def __init__(
        self,
        message: str,
        lo: float,
        hi: float,
        f_lo: Optional[float] = None,
        f_hi: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.lo = lo
        self.hi = hi
        self.f_lo = f_lo
        self.f_hi = f_hi


class NumericalFailure(SolverError):
    """Raised when an iteration hits a numerical degeneracy.

    Attributes:
        kind: What went wrong.
        point: The point at which it happened (scalar or array).
        result: Partial result holding the last accepted iterate, when the
            solver had one.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        point: Any = None,
        result: Optional["SolveResult"] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.point = point
        self.result = result

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.args[0]}"


__all__ = [
    "FailureKind",
    "InvalidBracketError",
    "NumericalFailure",
    "SolverError",
]
