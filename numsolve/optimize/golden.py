"""Golden-section search for the minimum of a unimodal function."""

from __future__ import annotations

import math
from typing import Optional

from ..config import ConvergenceCriteria, default_criteria
from ..core import Bracket, ScalarFunction, SolveResult, Status, evaluate
from ..errors import InvalidBracketError, NumericalFailure
from ..logging import get_logger

logger = get_logger(__name__)

INV_PHI = (math.sqrt(5.0) - 1.0) / 2.0  # 1 / phi
INV_PHI2 = (3.0 - math.sqrt(5.0)) / 2.0  # 1 / phi**2


def golden_section_minimize(
    fun: ScalarFunction,
    lo: float,
    hi: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    history: bool = False,
) -> SolveResult:
    """Minimize ``fun`` on ``[lo, hi]`` by golden-section search.

    The bracket must contain a single local minimum; this is not checked.
    Two interior points sit at the golden-ratio positions and each iteration
    drops the sub-interval beyond the worse one, so the width shrinks by
    ``1/phi ~ 0.618`` per iteration at the cost of one new evaluation.
    Converges once the width is at most ``tol_step``. The returned ``x`` is
    the midpoint of the sub-interval next to the better interior point.

    Raises
    ------
    InvalidBracketError
        If the endpoints are not finite or coincide.
    NumericalFailure
        ``UNDEFINED_EVALUATION`` if ``fun`` is not finite at a probe point.
    """
    crit = criteria if criteria is not None else default_criteria("golden")
    a, b = float(lo), float(hi)
    if not (math.isfinite(a) and math.isfinite(b)):
        raise InvalidBracketError("golden section: bracket endpoints must be finite", a, b)
    if a == b:
        raise InvalidBracketError(f"golden section: bracket [{a}, {b}] has zero width", a, b)
    a, b = min(a, b), max(a, b)
    h = b - a
    nfev = 0
    nit = 0
    hist: list[Bracket] = [Bracket(a, b)] if history else []

    def result(x: float, fx: float, status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=x,
            fun=fx,
            nit=nit,
            status=status,
            message=message,
            nfev=nfev,
            bracket=Bracket(a, b),
            history=hist,
        )

    try:
        if crit.step_converged(h, a + 0.5 * h):
            x = a + 0.5 * h
            fx = evaluate(fun, x)
            nfev += 1
            return result(x, fx, Status.CONVERGED, "Initial bracket already within tolerance.")

        c = a + INV_PHI2 * h
        d = a + INV_PHI * h
        yc = evaluate(fun, c)
        yd = evaluate(fun, d)
        nfev += 2
        converged = False
        while nit < crit.max_iter:
            if yc < yd:
                b = d
                d = c
                yd = yc
                h = INV_PHI * h
                c = a + INV_PHI2 * h
                yc = evaluate(fun, c)
            else:
                a = c
                c = d
                yc = yd
                h = INV_PHI * h
                d = a + INV_PHI * h
                yd = evaluate(fun, d)
            nfev += 1
            nit += 1
            if history:
                hist.append(Bracket(a, b))
            logger.debug("golden iter %d: [%.17g, %.17g] width=%.3e", nit, a, b, h)
            if crit.step_converged(h, a + 0.5 * h):
                converged = True
                break

        x = 0.5 * (a + d) if yc < yd else 0.5 * (c + b)
        fx = evaluate(fun, x)
        nfev += 1
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(a + 0.5 * (b - a), float("nan"), Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("golden section failed after %d iterations: %s", nit, exc)
        raise

    if converged:
        return result(x, fx, Status.CONVERGED, "Bracket width tolerance satisfied.")
    logger.info("golden section: maximum iterations (%d) reached, width %.3e", crit.max_iter, h)
    return result(x, fx, Status.MAX_ITER, "Maximum iterations reached.")


__all__ = ["golden_section_minimize"]
