"""Secant method for scalar equations."""

from __future__ import annotations

from typing import Optional

from ..config import ConvergenceCriteria, default_criteria
from ..core import ScalarFunction, SolveResult, Status, check_iterate, evaluate
from ..errors import FailureKind, NumericalFailure
from ..logging import get_logger

logger = get_logger(__name__)


def secant_solve(
    fun: ScalarFunction,
    x0: float,
    x1: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    history: bool = False,
) -> SolveResult:
    """Secant iteration from the starting pair ``(x0, x1)``.

    ``x_{k+1} = x_k - f(x_k) (x_k - x_{k-1}) / (f(x_k) - f(x_{k-1}))``

    No bracket is needed, so the iteration can wander off or diverge for a
    poor starting pair. Raises ``NumericalFailure`` with kind
    ``ZERO_DENOMINATOR`` when the two latest function values coincide.
    """
    crit = criteria if criteria is not None else default_criteria("secant")
    x_prev = float(x0)
    x = float(x1)
    check_iterate(x_prev)
    check_iterate(x)
    hist: list[float] = [x_prev, x] if history else []
    nfev = 0
    nit = 0
    fx = float("nan")

    def result(status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=x, fun=fx, nit=nit, status=status, message=message, nfev=nfev, history=hist
        )

    try:
        f_prev = evaluate(fun, x_prev)
        fx = evaluate(fun, x)
        nfev += 2
        if abs(f_prev) < abs(fx) and abs(f_prev) <= crit.tol_residual:
            x, fx = x_prev, f_prev
        while True:
            if abs(fx) <= crit.tol_residual:
                return result(Status.CONVERGED, "Residual tolerance satisfied.")
            if nit >= crit.max_iter:
                break
            denom = fx - f_prev
            if denom == 0.0:
                raise NumericalFailure(
                    FailureKind.ZERO_DENOMINATOR,
                    f"f(x_k) == f(x_(k-1)) == {fx} at x_k={x}, x_(k-1)={x_prev}",
                    point=x,
                )
            dx = fx * (x - x_prev) / denom
            x_new = x - dx
            check_iterate(x_new)
            x_prev, f_prev = x, fx
            x = x_new
            nit += 1
            if history:
                hist.append(x)
            fx = evaluate(fun, x)
            nfev += 1
            logger.debug("secant iter %d: x=%.17g f(x)=%.3e", nit, x, fx)
            if crit.step_converged(dx, x):
                return result(Status.CONVERGED, "Step tolerance satisfied.")
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("secant failed after %d iterations: %s", nit, exc)
        raise

    logger.info("secant: maximum iterations (%d) reached at x=%.17g", crit.max_iter, x)
    return result(Status.MAX_ITER, "Maximum iterations reached.")


__all__ = ["secant_solve"]
