"""Nelder-Mead downhill simplex minimization.

Reference: Lagarias, Reeds, Wright & Wright, "Convergence properties of the
Nelder-Mead simplex method in low dimensions", SIAM J. Optim. 9 (1998).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import DEFAULTS, ConvergenceCriteria, default_criteria
from ..core import Array, Objective, SolveResult, Status, check_iterate, undefined_evaluation
from ..errors import NumericalFailure
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass
class Simplex:
    """``n + 1`` vertices in ``R^n`` with their objective values.

    Both arrays are allocated once and updated in place; after :meth:`sort`
    row 0 is the best vertex and row ``n`` the worst.
    """

    vertices: Array
    values: Array

    @property
    def dim(self) -> int:
        return self.vertices.shape[1]

    def sort(self) -> None:
        """Order vertices by value; ties keep their current order."""
        order = np.argsort(self.values, kind="stable")
        self.vertices[:] = self.vertices[order]
        self.values[:] = self.values[order]

    def centroid(self) -> Array:
        """Centroid of every vertex except the worst."""
        return self.vertices[:-1].mean(axis=0)

    def spread(self) -> float:
        return float(self.values[-1] - self.values[0])

    def size(self) -> float:
        """Largest coordinate distance of any vertex from the best one."""
        return float(np.max(np.abs(self.vertices[1:] - self.vertices[0])))

    def replace_worst(self, x: Array, fx: float) -> None:
        self.vertices[-1] = x
        self.values[-1] = fx


def _objective_value(fun: Objective, x: Array) -> float:
    # Non-finite values rank as worst instead of aborting the search.
    value = float(fun(x))
    return value if np.isfinite(value) else np.inf


def nelder_mead(
    fun: Objective,
    x0: Array,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    initial_step: float = DEFAULTS.simplex_initial_step,
    history: bool = False,
) -> SolveResult:
    """Minimize ``fun`` with the Nelder-Mead simplex method.

    The initial simplex is ``x0`` plus ``x0 + initial_step * e_i`` for each
    coordinate direction. Each iteration reflects the worst vertex through
    the centroid of the others and then, depending on how the reflected
    point ranks, accepts it, expands further, contracts (outside or inside)
    or shrinks the whole simplex toward the best vertex.

    Converges when ``max(f) - min(f)`` over the simplex is at most
    ``tol_residual`` or every vertex is within ``tol_step`` (plus
    ``rtol_step`` times the largest coordinate of the best vertex) of the
    best one in every coordinate. This is a local method with no guarantee
    of finding a global minimum.

    Non-finite objective values are ranked as ``+inf``; if the best vertex
    is non-finite too, ``NumericalFailure`` (``UNDEFINED_EVALUATION``) is
    raised.
    """
    crit = criteria if criteria is not None else default_criteria("nelder_mead")
    if initial_step == 0 or not np.isfinite(initial_step):
        raise ValueError("initial_step must be finite and non-zero")
    x0 = np.atleast_1d(np.asarray(x0, dtype=float)).copy()
    if x0.ndim != 1 or x0.size == 0:
        raise ValueError("x0 must be a non-empty 1-D array")
    check_iterate(x0)

    alpha = DEFAULTS.simplex_reflection
    gamma = DEFAULTS.simplex_expansion
    rho = DEFAULTS.simplex_contraction
    sigma = DEFAULTS.simplex_shrink

    n = x0.size
    vertices = np.tile(x0, (n + 1, 1))
    for i in range(n):
        vertices[i + 1, i] += initial_step
    values = np.array([_objective_value(fun, v) for v in vertices], dtype=float)
    simplex = Simplex(vertices, values)
    nfev = n + 1
    nit = 0
    hist: list[Array] = []

    def result(status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=simplex.vertices[0].copy(),
            fun=float(simplex.values[0]),
            nit=nit,
            status=status,
            message=message,
            nfev=nfev,
            history=hist,
        )

    try:
        while True:
            simplex.sort()
            best = simplex.vertices[0]
            if not np.isfinite(simplex.values[0]):
                raise undefined_evaluation(best, simplex.values[0])
            if history:
                hist.append(best.copy())
            if simplex.spread() <= crit.tol_residual:
                logger.debug("nelder_mead: value spread converged after %d iterations", nit)
                return result(Status.CONVERGED, "Simplex value spread tolerance satisfied.")
            if simplex.size() <= crit.tol_step + crit.rtol_step * float(np.max(np.abs(best))):
                logger.debug("nelder_mead: simplex size converged after %d iterations", nit)
                return result(Status.CONVERGED, "Simplex size tolerance satisfied.")
            if nit >= crit.max_iter:
                break
            nit += 1

            f_best = simplex.values[0]
            f_second = simplex.values[-2]
            f_worst = simplex.values[-1]
            worst = simplex.vertices[-1].copy()
            centroid = simplex.centroid()

            x_r = centroid + alpha * (centroid - worst)
            check_iterate(x_r)
            f_r = _objective_value(fun, x_r)
            nfev += 1

            if f_best <= f_r < f_second:
                simplex.replace_worst(x_r, f_r)
                move = "reflect"
            elif f_r < f_best:
                x_e = centroid + gamma * (x_r - centroid)
                check_iterate(x_e)
                f_e = _objective_value(fun, x_e)
                nfev += 1
                if f_e < f_r:
                    simplex.replace_worst(x_e, f_e)
                    move = "expand"
                else:
                    simplex.replace_worst(x_r, f_r)
                    move = "reflect"
            else:
                if f_r < f_worst:
                    x_c = centroid + rho * (x_r - centroid)
                    accept_bound = f_r
                    move = "contract outside"
                else:
                    x_c = centroid + rho * (worst - centroid)
                    accept_bound = f_worst
                    move = "contract inside"
                check_iterate(x_c)
                f_c = _objective_value(fun, x_c)
                nfev += 1
                accepted = f_c <= accept_bound if f_r < f_worst else f_c < accept_bound
                if accepted:
                    simplex.replace_worst(x_c, f_c)
                else:
                    best = simplex.vertices[0].copy()
                    simplex.vertices[1:] = best + sigma * (simplex.vertices[1:] - best)
                    for i in range(1, n + 1):
                        simplex.values[i] = _objective_value(fun, simplex.vertices[i])
                    nfev += n
                    move = "shrink"
            logger.debug("nelder_mead iter %d: %s, best f=%.6e", nit, move, simplex.values.min())
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("nelder_mead failed after %d iterations: %s", nit, exc)
        raise

    logger.info("nelder_mead: maximum iterations (%d) reached", crit.max_iter)
    return result(Status.MAX_ITER, "Maximum iterations reached.")


__all__ = ["Simplex", "nelder_mead"]
