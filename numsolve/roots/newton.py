"""Newton and Halley iterations for scalar equations ``f(x) = 0``.

Both methods come in two flavours: the plain entry points take analytic
derivatives, the ``_num`` entry points approximate them with central
finite differences at every iterate (two extra evaluations for ``f'``,
three for ``f''``).
"""

from __future__ import annotations

from typing import Callable, Optional

from ..config import DEFAULTS, ConvergenceCriteria, default_criteria
from ..core import (
    Analytic,
    DerivativeSpec,
    Numeric,
    ScalarFunction,
    SolveResult,
    Status,
    check_iterate,
    evaluate,
)
from ..errors import FailureKind, NumericalFailure
from ..finite_diff import derivative_from_spec
from ..logging import get_logger

logger = get_logger(__name__)

# Maps (x, f(x)) to (dx, nfev, njev); the next iterate is x - dx.
StepRule = Callable[[float, float], "tuple[float, int, int]"]


def _newton_step(
    fun: ScalarFunction, spec: DerivativeSpec, min_derivative: float
) -> StepRule:
    def step(x: float, fx: float) -> tuple[float, int, int]:
        dfx, fev, jev = derivative_from_spec(spec, fun, x, order=1)
        if abs(dfx) < min_derivative:
            raise NumericalFailure(
                FailureKind.ZERO_DERIVATIVE,
                f"derivative {dfx:.3e} vanishes at x={x}",
                point=x,
            )
        return fx / dfx, fev, jev

    return step


def _halley_step(
    fun: ScalarFunction,
    first: DerivativeSpec,
    second: DerivativeSpec,
    min_derivative: float,
) -> StepRule:
    def step(x: float, fx: float) -> tuple[float, int, int]:
        d1, fev1, jev1 = derivative_from_spec(first, fun, x, order=1)
        d2, fev2, jev2 = derivative_from_spec(second, fun, x, order=2)
        denom = 2.0 * d1 * d1 - fx * d2
        if abs(denom) < min_derivative:
            raise NumericalFailure(
                FailureKind.ZERO_DENOMINATOR,
                f"Halley denominator {denom:.3e} vanishes at x={x}",
                point=x,
            )
        return 2.0 * fx * d1 / denom, fev1 + fev2, jev1 + jev2

    return step


def _iterate(
    method: str,
    fun: ScalarFunction,
    x0: float,
    step_rule: StepRule,
    criteria: Optional[ConvergenceCriteria],
    history: bool,
) -> SolveResult:
    crit = criteria if criteria is not None else default_criteria(method)
    x = float(x0)
    check_iterate(x)
    hist: list[float] = [x] if history else []
    nfev = 0
    njev = 0
    nit = 0
    fx = float("nan")

    def result(status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=x,
            fun=fx,
            nit=nit,
            status=status,
            message=message,
            nfev=nfev,
            njev=njev,
            history=hist,
        )

    try:
        fx = evaluate(fun, x)
        nfev += 1
        while True:
            if abs(fx) <= crit.tol_residual:
                logger.debug("%s: residual tolerance met after %d iterations", method, nit)
                return result(Status.CONVERGED, "Residual tolerance satisfied.")
            if nit >= crit.max_iter:
                break
            dx, fev, jev = step_rule(x, fx)
            nfev += fev
            njev += jev
            x_new = x - dx
            check_iterate(x_new)
            x = x_new
            nit += 1
            if history:
                hist.append(x)
            fx = evaluate(fun, x)
            nfev += 1
            logger.debug("%s iter %d: x=%.17g f(x)=%.3e dx=%.3e", method, nit, x, fx, dx)
            if crit.step_converged(dx, x):
                logger.debug("%s: step tolerance met after %d iterations", method, nit)
                return result(Status.CONVERGED, "Step tolerance satisfied.")
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("%s failed after %d iterations: %s", method, nit, exc)
        raise

    logger.info("%s: maximum iterations (%d) reached at x=%.17g", method, crit.max_iter, x)
    return result(Status.MAX_ITER, "Maximum iterations reached.")


def _min_derivative(value: Optional[float]) -> float:
    return DEFAULTS.min_derivative if value is None else float(value)


def newton_solve(
    fun: ScalarFunction,
    dfun: ScalarFunction,
    x0: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    min_derivative: Optional[float] = None,
    history: bool = False,
) -> SolveResult:
    """Newton's method ``x_{k+1} = x_k - f(x_k) / f'(x_k)``.

    Parameters
    ----------
    fun:
        Function whose root is sought.
    dfun:
        Its analytic derivative.
    x0:
        Initial guess.
    criteria:
        Stopping rules; defaults to ``default_criteria("newton")``.
    min_derivative:
        ``|f'(x)|`` below this raises instead of taking a huge step.
    history:
        Record every iterate in ``result.history``.

    Raises
    ------
    NumericalFailure
        ``ZERO_DERIVATIVE`` when the derivative vanishes,
        ``UNDEFINED_EVALUATION`` when ``fun`` or ``dfun`` is not finite,
        ``NON_FINITE_ITERATE`` when the update overflows.
    """
    rule = _newton_step(fun, Analytic(dfun), _min_derivative(min_derivative))
    return _iterate("newton", fun, x0, rule, criteria, history)


def newton_solve_num(
    fun: ScalarFunction,
    x0: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    h: Optional[float] = None,
    min_derivative: Optional[float] = None,
    history: bool = False,
) -> SolveResult:
    """Newton's method with a central finite-difference derivative of step ``h``."""
    rule = _newton_step(fun, Numeric(h), _min_derivative(min_derivative))
    return _iterate("newton_num", fun, x0, rule, criteria, history)


def halley_solve(
    fun: ScalarFunction,
    dfun: ScalarFunction,
    d2fun: ScalarFunction,
    x0: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    min_derivative: Optional[float] = None,
    history: bool = False,
) -> SolveResult:
    """Halley's method ``x_{k+1} = x_k - 2 f f' / (2 f'^2 - f f'')``.

    Cubically convergent near a simple root. Raises ``NumericalFailure``
    with kind ``ZERO_DENOMINATOR`` when the Halley denominator vanishes.
    """
    rule = _halley_step(fun, Analytic(dfun), Analytic(d2fun), _min_derivative(min_derivative))
    return _iterate("halley", fun, x0, rule, criteria, history)


def halley_solve_num(
    fun: ScalarFunction,
    x0: float,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    h: Optional[float] = None,
    min_derivative: Optional[float] = None,
    history: bool = False,
) -> SolveResult:
    """Halley's method with finite-difference first and second derivatives.

    A caller-supplied ``h`` is used for both derivatives; by default each
    gets the step suited to its order.
    """
    spec = Numeric(h)
    rule = _halley_step(fun, spec, spec, _min_derivative(min_derivative))
    return _iterate("halley_num", fun, x0, rule, criteria, history)


__all__ = ["halley_solve", "halley_solve_num", "newton_solve", "newton_solve_num"]
