"""Select a solver by name.

This is a thin wrapper over the individual entry points for callers that
pick the method from configuration. Arguments a method does not use are
ignored; missing required ones raise ``ValueError``.
"""

from __future__ import annotations

from typing import Optional

from .config import ConvergenceCriteria
from .core import ScalarFunction, SolveResult
from .optimize.golden import golden_section_minimize
from .roots.bracketing import bisection_solve, ridder_solve
from .roots.newton import halley_solve, halley_solve_num, newton_solve, newton_solve_num
from .roots.secant import secant_solve

ROOT_METHODS = (
    "bisection",
    "halley",
    "halley_num",
    "newton",
    "newton_num",
    "ridder",
    "secant",
)
SCALAR_MINIMIZERS = ("golden",)


def _require(method: str, **values: object) -> None:
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise ValueError(f"method '{method}' requires: {', '.join(missing)}")


def find_root(
    method: str,
    fun: ScalarFunction,
    *,
    x0: Optional[float] = None,
    x1: Optional[float] = None,
    bracket: Optional[tuple[float, float]] = None,
    dfun: Optional[ScalarFunction] = None,
    d2fun: Optional[ScalarFunction] = None,
    criteria: Optional[ConvergenceCriteria] = None,
    h: Optional[float] = None,
    min_derivative: Optional[float] = None,
    history: bool = False,
) -> SolveResult:
    """Solve ``fun(x) = 0`` with the named method.

    Args:
        method: One of ``ROOT_METHODS``.
        fun: Function whose root is sought.
        x0: Initial guess (Newton, Halley) or first secant point.
        x1: Second secant point.
        bracket: ``(lo, hi)`` for bisection and Ridder.
        dfun: First derivative for ``newton`` and ``halley``.
        d2fun: Second derivative for ``halley``.
        criteria: Stopping rules; method defaults when None.
        h: Finite-difference step for the ``_num`` methods.
        min_derivative: Zero-derivative threshold for Newton and Halley;
            the library default when None.
        history: Record iterates (or brackets).

    Raises:
        ValueError: If the method name is unknown or a required argument is
            missing.
    """
    name = method.lower()

    if name == "newton":
        _require(name, x0=x0, dfun=dfun)
        return newton_solve(
            fun, dfun, x0, criteria, min_derivative=min_derivative, history=history
        )
    elif name == "newton_num":
        _require(name, x0=x0)
        return newton_solve_num(
            fun, x0, criteria, h=h, min_derivative=min_derivative, history=history
        )
    elif name == "halley":
        _require(name, x0=x0, dfun=dfun, d2fun=d2fun)
        return halley_solve(
            fun, dfun, d2fun, x0, criteria, min_derivative=min_derivative, history=history
        )
    elif name == "halley_num":
        _require(name, x0=x0)
        return halley_solve_num(
            fun, x0, criteria, h=h, min_derivative=min_derivative, history=history
        )
    elif name == "secant":
        _require(name, x0=x0, x1=x1)
        return secant_solve(fun, x0, x1, criteria, history=history)
    elif name == "bisection":
        _require(name, bracket=bracket)
        return bisection_solve(fun, bracket[0], bracket[1], criteria, history=history)
    elif name == "ridder":
        _require(name, bracket=bracket)
        return ridder_solve(fun, bracket[0], bracket[1], criteria, history=history)
    else:
        raise ValueError(
            f"Unsupported root-finding method '{method}'. "
            f"Supported names: {list(ROOT_METHODS)}"
        )


def minimize_scalar(
    method: str,
    fun: ScalarFunction,
    bracket: tuple[float, float],
    *,
    criteria: Optional[ConvergenceCriteria] = None,
    history: bool = False,
) -> SolveResult:
    """Minimize a univariate function with the named bracketing method."""
    name = method.lower()
    if name == "golden":
        lo, hi = bracket
        return golden_section_minimize(fun, lo, hi, criteria, history=history)
    raise ValueError(
        f"Unsupported scalar minimizer '{method}'. Supported names: {list(SCALAR_MINIMIZERS)}"
    )


__all__ = ["ROOT_METHODS", "SCALAR_MINIMIZERS", "find_root", "minimize_scalar"]
