"""Bracketing root finders: bisection and Ridder's method.

Both methods start from an interval whose endpoints have function values of
strictly opposite sign and keep such an interval around the root at every
step, so they cannot diverge. Bisection converges linearly; Ridder's
exponential interpolation converges roughly quadratically.
"""

from __future__ import annotations

import math
from typing import Optional

from ..config import ConvergenceCriteria, default_criteria
from ..core import Bracket, ScalarFunction, SolveResult, Status, check_iterate, evaluate
from ..errors import InvalidBracketError, NumericalFailure
from ..logging import get_logger

logger = get_logger(__name__)


def _initial_bracket(
    method: str, fun: ScalarFunction, lo: float, hi: float
) -> tuple[float, float, float, float]:
    """Order and validate ``(lo, hi)``; return it with both function values."""
    lo, hi = float(lo), float(hi)
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise InvalidBracketError(f"{method}: bracket endpoints must be finite", lo, hi)
    if lo == hi:
        raise InvalidBracketError(f"{method}: bracket [{lo}, {hi}] has zero width", lo, hi)
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi, evaluate(fun, lo), evaluate(fun, hi)


def _same_sign(a: float, b: float) -> bool:
    return (a > 0.0 and b > 0.0) or (a < 0.0 and b < 0.0)


def _check_sign_change(method: str, lo: float, hi: float, f_lo: float, f_hi: float) -> None:
    if _same_sign(f_lo, f_hi):
        logger.warning("%s: f(%g)=%g and f(%g)=%g have the same sign", method, lo, f_lo, hi, f_hi)
        raise InvalidBracketError(
            f"{method} requires f(lo) and f(hi) of opposite sign, "
            f"got f({lo})={f_lo} and f({hi})={f_hi}",
            lo,
            hi,
            f_lo,
            f_hi,
        )


def bisection_solve(
    fun: ScalarFunction,
    lo: float,
    hi: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    history: bool = False,
) -> SolveResult:
    """Find a root of ``fun`` in ``[lo, hi]`` by repeated halving.

    Every iteration evaluates the midpoint and keeps the half on which the
    sign changes, so the bracket width after ``k`` iterations is
    ``(hi - lo) / 2**k``. Stops when the width falls to ``tol_step`` (plus
    ``rtol_step`` times the midpoint magnitude) or ``|f(mid)| <= tol_residual``.

    Raises
    ------
    InvalidBracketError
        If the endpoints are not finite and distinct or ``f(lo)``, ``f(hi)``
        share a sign; raised right after the two endpoint evaluations.
    """
    crit = criteria if criteria is not None else default_criteria("bisection")
    lo, hi, f_lo, f_hi = _initial_bracket("bisection", fun, lo, hi)
    nfev = 2
    nit = 0
    x, fx = (lo, f_lo) if abs(f_lo) <= abs(f_hi) else (hi, f_hi)
    hist: list[Bracket] = [Bracket(lo, hi)] if history else []

    def result(status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=x,
            fun=fx,
            nit=nit,
            status=status,
            message=message,
            nfev=nfev,
            bracket=Bracket(lo, hi),
            history=hist,
        )

    if abs(fx) <= crit.tol_residual:
        return result(Status.CONVERGED, "Bracket endpoint is a root.")
    _check_sign_change("bisection", lo, hi, f_lo, f_hi)

    try:
        while nit < crit.max_iter:
            mid = lo + 0.5 * (hi - lo)
            if mid <= lo or mid >= hi:
                return result(Status.CONVERGED, "Bracket reached floating-point resolution.")
            f_mid = evaluate(fun, mid)
            nfev += 1
            nit += 1
            if _same_sign(f_mid, f_lo):
                lo, f_lo = mid, f_mid
            else:
                hi, f_hi = mid, f_mid
            x, fx = mid, f_mid
            if history:
                hist.append(Bracket(lo, hi))
            logger.debug("bisection iter %d: [%.17g, %.17g] f(mid)=%.3e", nit, lo, hi, f_mid)
            if abs(f_mid) <= crit.tol_residual:
                return result(Status.CONVERGED, "Residual tolerance satisfied.")
            if crit.step_converged(hi - lo, mid):
                return result(Status.CONVERGED, "Bracket width tolerance satisfied.")
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("bisection failed after %d iterations: %s", nit, exc)
        raise

    logger.info("bisection: maximum iterations (%d) reached, bracket [%g, %g]", crit.max_iter, lo, hi)
    return result(Status.MAX_ITER, "Maximum iterations reached.")


def ridder_solve(
    fun: ScalarFunction,
    lo: float,
    hi: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    history: bool = False,
) -> SolveResult:
    """Ridder's method on the bracket ``[lo, hi]``.

    Each iteration evaluates the midpoint ``m`` and places a new point
    through the exponential interpolation

        x_new = m + (m - lo) * sign(f(lo) - f(hi)) * f(m) / sqrt(f(m)**2 - f(lo) f(hi))

    which always lies inside the bracket. The bracket is then tightened
    around whichever pair among ``lo``, ``m``, ``x_new``, ``hi`` straddles
    the root. Two evaluations per iteration.

    Raises
    ------
    InvalidBracketError
        Under the same conditions as :func:`bisection_solve`.
    """
    crit = criteria if criteria is not None else default_criteria("ridder")
    lo, hi, f_lo, f_hi = _initial_bracket("ridder", fun, lo, hi)
    nfev = 2
    nit = 0
    x, fx = (lo, f_lo) if abs(f_lo) <= abs(f_hi) else (hi, f_hi)
    hist: list[Bracket] = [Bracket(lo, hi)] if history else []

    def result(status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=x,
            fun=fx,
            nit=nit,
            status=status,
            message=message,
            nfev=nfev,
            bracket=Bracket.ordered(lo, hi),
            history=hist,
        )

    if abs(fx) <= crit.tol_residual:
        return result(Status.CONVERGED, "Bracket endpoint is a root.")
    _check_sign_change("ridder", lo, hi, f_lo, f_hi)

    previous: Optional[float] = None
    try:
        while nit < crit.max_iter:
            mid = lo + 0.5 * (hi - lo)
            f_mid = evaluate(fun, mid)
            nfev += 1
            nit += 1
            if abs(f_mid) <= crit.tol_residual:
                x, fx = mid, f_mid
                return result(Status.CONVERGED, "Residual tolerance satisfied.")
            s = math.sqrt(f_mid * f_mid - f_lo * f_hi)
            direction = 1.0 if f_lo >= f_hi else -1.0
            x_new = mid + (mid - lo) * direction * f_mid / s
            check_iterate(x_new)
            f_new = evaluate(fun, x_new)
            nfev += 1
            x, fx = x_new, f_new
            if abs(f_new) <= crit.tol_residual:
                return result(Status.CONVERGED, "Residual tolerance satisfied.")
            if not _same_sign(f_mid, f_new):
                lo, f_lo, hi, f_hi = mid, f_mid, x_new, f_new
            elif not _same_sign(f_lo, f_new):
                hi, f_hi = x_new, f_new
            else:
                lo, f_lo = x_new, f_new
            if history:
                hist.append(Bracket.ordered(lo, hi))
            logger.debug("ridder iter %d: x=%.17g f(x)=%.3e width=%.3e", nit, x, fx, abs(hi - lo))
            if crit.step_converged(abs(hi - lo), x):
                return result(Status.CONVERGED, "Bracket width tolerance satisfied.")
            if previous is not None and crit.step_converged(x_new - previous, x):
                return result(Status.CONVERGED, "Step tolerance satisfied.")
            previous = x_new
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("ridder failed after %d iterations: %s", nit, exc)
        raise

    logger.info("ridder: maximum iterations (%d) reached at x=%.17g", crit.max_iter, x)
    return result(Status.MAX_ITER, "Maximum iterations reached.")


__all__ = ["bisection_solve", "ridder_solve"]
