"""Core interfaces shared across the root finders and optimizers."""

from __future__ import annotations

import functools
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Union

import numpy as np

from .errors import FailureKind, NumericalFailure
from .logging import get_logger

Array = np.ndarray
ScalarFunction = Callable[[float], float]
VectorFunction = Callable[[Array], Array]
Objective = Callable[[Array], float]

logger = get_logger(__name__)


class Status(Enum):
    """Why a solver stopped."""

    CONVERGED = "converged"
    MAX_ITER = "max_iter"
    NUMERICAL_FAILURE = "numerical_failure"


@dataclass(frozen=True)
class Bracket:
    """Interval ``[lo, hi]`` known to contain a root or a minimum."""

    lo: float
    hi: float

    @property
    def width(self) -> float:
        return self.hi - self.lo

    @property
    def midpoint(self) -> float:
        return self.lo + 0.5 * (self.hi - self.lo)

    def contains(self, x: float) -> bool:
        return self.lo <= x <= self.hi

    @classmethod
    def ordered(cls, a: float, b: float) -> "Bracket":
        """Build a bracket from two endpoints given in any order."""
        return cls(min(a, b), max(a, b))


@dataclass
class SolveResult:
    """Standard result object returned by every solver in this package.

    Attributes:
        x: Final iterate (float for univariate methods, array otherwise).
        fun: Residual ``f(x)`` for root finders, objective value for
            minimizers, sum of squared residuals for least squares.
        nit: Number of iterations performed.
        status: Termination reason.
        message: Human-readable description of ``status``.
        nfev: Number of function evaluations.
        njev: Number of analytic derivative (or Jacobian) evaluations.
        bracket: Final bracket for bracketing methods.
        history: Iterates (or brackets) recorded when ``history=True``.
    """

    x: Union[float, Array]
    fun: float
    nit: int
    status: Status
    message: str
    nfev: int = 0
    njev: int = 0
    bracket: Optional[Bracket] = None
    history: List[Any] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.status is Status.CONVERGED


@dataclass(frozen=True)
class Analytic:
    """Derivative supplied by the caller as a callable."""

    fun: Callable[..., Any]


@dataclass(frozen=True)
class Numeric:
    """Derivative approximated by central finite differences.

    ``step=None`` picks a step scaled to the evaluation point.
    """

    step: Optional[float] = None


DerivativeSpec = Union[Analytic, Numeric]


def evaluate(fun: ScalarFunction, x: Any) -> float:
    """Evaluate a scalar-valued function and reject non-finite values."""
    value = float(fun(x))
    if not np.isfinite(value):
        raise undefined_evaluation(x, value)
    return value


def evaluate_vector(fun: VectorFunction, x: Array) -> Array:
    """Evaluate a vector-valued function as a 1-D float64 array."""
    value = np.atleast_1d(np.asarray(fun(x), dtype=float))
    if not np.all(np.isfinite(value)):
        raise undefined_evaluation(x, value)
    return value


def undefined_evaluation(x: Any, value: Any) -> NumericalFailure:
    logger.warning("function is undefined at x=%s (returned %s)", x, value)
    return NumericalFailure(
        FailureKind.UNDEFINED_EVALUATION,
        f"function returned a non-finite value {value} at x={x}",
        point=x,
    )


def check_iterate(
    candidate: Union[float, Array], result: Optional[SolveResult] = None
) -> None:
    """Raise if a freshly computed iterate is NaN or infinite."""
    if not np.all(np.isfinite(candidate)):
        logger.warning("non-finite iterate %s", candidate)
        raise NumericalFailure(
            FailureKind.NON_FINITE_ITERATE,
            f"iteration produced a non-finite point {candidate}",
            point=candidate,
            result=result,
        )


def cancellable(fun: Callable[..., Any], event: threading.Event) -> Callable[..., Any]:
    """Wrap ``fun`` so that it fails fast once ``event`` is set.

    Solvers have no cancellation primitive of their own besides the
    iteration cap. Passing the wrapped function instead makes the next
    evaluation after ``event.set()`` raise a ``NumericalFailure`` of kind
    ``CANCELLED``.

    Example:
        >>> import threading
        >>> stop = threading.Event()
        >>> f = cancellable(lambda x: x * x - 2.0, stop)
        >>> f(1.0)
        -1.0
    """

    @functools.wraps(fun)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if event.is_set():
            point = args[0] if args else None
            raise NumericalFailure(
                FailureKind.CANCELLED, "evaluation cancelled by caller", point=point
            )
        return fun(*args, **kwargs)

    return wrapper


__all__ = [
    "Analytic",
    "Array",
    "Bracket",
    "DerivativeSpec",
    "Numeric",
    "Objective",
    "ScalarFunction",
    "SolveResult",
    "Status",
    "VectorFunction",
    "cancellable",
    "check_iterate",
    "evaluate",
    "evaluate_vector",
    "undefined_evaluation",
]
