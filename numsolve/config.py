"""Default tolerances, step sizes and stopping criteria.

All numeric constants used by the solvers live in :data:`DEFAULTS` so that
every method reads the same values. Per-method stopping criteria are looked
up with :func:`default_criteria`; callers derive variants with
:meth:`ConvergenceCriteria.replace` instead of mutating shared state.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import numpy as np

_EPS = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class Defaults:
    """Library-wide constants."""

    tol_residual: float = 1e-12
    tol_step: float = 1e-12
    rtol_step: float = 0.0
    max_iter: int = 100
    bracket_max_iter: int = 200
    simplex_max_iter: int = 5000
    least_squares_max_iter: int = 50
    # |f'| (Newton) or the Halley denominator below this is treated as zero.
    min_derivative: float = 1e-14
    # Finite-difference steps are these scales times max(1, |x|).
    fd_order1_scale: float = _EPS ** (1.0 / 3.0)
    fd_order2_scale: float = _EPS ** (1.0 / 4.0)
    simplex_initial_step: float = 0.1
    simplex_reflection: float = 1.0
    simplex_expansion: float = 2.0
    simplex_contraction: float = 0.5
    simplex_shrink: float = 0.5


DEFAULTS = Defaults()


@dataclass(frozen=True)
class ConvergenceCriteria:
    """Stopping rules shared by every solver.

    Attributes:
        tol_residual: Absolute tolerance on ``|f(x)|`` for root finders, on the
            spread of simplex values for Nelder-Mead and on the change of the
            sum of squared residuals for Gauss-Newton.
        tol_step: Absolute tolerance on the step length, the bracket width or
            the simplex size.
        rtol_step: Relative part of the step test; a step ``dx`` taken to
            ``x`` is small enough once ``|dx| <= tol_step + rtol_step * |x|``.
        max_iter: Maximum number of iterations before giving up with
            ``Status.MAX_ITER``.
    """

    tol_residual: float = DEFAULTS.tol_residual
    tol_step: float = DEFAULTS.tol_step
    rtol_step: float = DEFAULTS.rtol_step
    max_iter: int = DEFAULTS.max_iter

    def __post_init__(self) -> None:
        for name in ("tol_residual", "tol_step", "rtol_step"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")
        if isinstance(self.max_iter, bool) or not isinstance(self.max_iter, (int, np.integer)):
            raise ValueError(f"max_iter must be an integer, got {self.max_iter!r}")
        if self.max_iter < 0:
            raise ValueError("max_iter must be non-negative")

    def replace(self, **changes: float) -> "ConvergenceCriteria":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def step_converged(self, step: float, scale: float) -> bool:
        """Return True if a step of size ``step`` near ``scale`` is negligible."""
        return abs(step) <= self.tol_step + self.rtol_step * abs(scale)


_METHOD_CRITERIA: Mapping[str, ConvergenceCriteria] = MappingProxyType(
    {
        "newton": ConvergenceCriteria(),
        "halley": ConvergenceCriteria(),
        "secant": ConvergenceCriteria(),
        "bisection": ConvergenceCriteria(max_iter=DEFAULTS.bracket_max_iter),
        "ridder": ConvergenceCriteria(max_iter=DEFAULTS.bracket_max_iter),
        "golden": ConvergenceCriteria(tol_step=1e-10, max_iter=DEFAULTS.bracket_max_iter),
        "nelder_mead": ConvergenceCriteria(tol_step=1e-10, max_iter=DEFAULTS.simplex_max_iter),
        "gauss_newton": ConvergenceCriteria(
            tol_step=1e-10,
            rtol_step=1e-10,
            max_iter=DEFAULTS.least_squares_max_iter,
        ),
    }
)


def default_criteria(method: str) -> ConvergenceCriteria:
    """Return the default stopping criteria for ``method``.

    Raises:
        ValueError: If ``method`` has no entry in the table.
    """
    key = method.lower()
    if key.endswith("_num"):
        key = key[: -len("_num")]
    try:
        return _METHOD_CRITERIA[key]
    except KeyError:
        supported = sorted(_METHOD_CRITERIA)
        raise ValueError(
            f"No default criteria for method '{method}'. Supported methods: {supported}"
        ) from None


__all__ = ["ConvergenceCriteria", "DEFAULTS", "Defaults", "default_criteria"]
