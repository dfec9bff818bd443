"""Gauss-Newton iteration for nonlinear least squares.

Fits parameters ``beta`` of a model ``y ~ model(x, beta)`` to samples
``(x_i, y_i)`` by minimizing the sum of squared residuals
``r_i(beta) = model(x_i, beta) - y_i``. Each step solves the normal
equations ``(J^T J) delta = -J^T r`` through a QR factorization of ``J``.

The step is undamped: on badly conditioned or strongly nonlinear problems
the iteration can overshoot and diverge. That is a known limitation of
plain Gauss-Newton and is left to the caller (better starting values or a
damped method).
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np

from ..config import ConvergenceCriteria, default_criteria
from ..core import Array, SolveResult, Status, check_iterate, undefined_evaluation
from ..errors import FailureKind, NumericalFailure
from ..finite_diff import numeric_jacobian
from ..logging import get_logger

logger = get_logger(__name__)

Model = Callable[[Array, Array], Array]
ModelJacobian = Callable[[Array, Array], Array]
# Maps beta to (J, nfev, njev).
JacobianRule = Callable[[Array], "tuple[Array, int, int]"]


def _residuals(model: Model, xdata: Array, ydata: Array, beta: Array) -> Array:
    pred = np.atleast_1d(np.asarray(model(xdata, beta), dtype=float))
    if pred.shape != ydata.shape:
        raise ValueError(
            f"model returned shape {pred.shape}, expected {ydata.shape} to match ydata"
        )
    if not np.all(np.isfinite(pred)):
        raise undefined_evaluation(beta, pred)
    return pred - ydata


def _gauss_newton_step(jac: Array, residuals: Array, beta: Array) -> Array:
    """Solve ``(J^T J) delta = -J^T r`` without forming an inverse.

    With ``J = QR`` the normal equations reduce to ``R delta = -Q^T r``.
    """
    p = jac.shape[1]
    rank = int(np.linalg.matrix_rank(jac))
    if rank < p:
        raise NumericalFailure(
            FailureKind.SINGULAR_JACOBIAN,
            f"Jacobian is rank deficient (rank {rank} < {p} parameters)",
            point=beta,
        )
    q, r = np.linalg.qr(jac)
    try:
        return np.linalg.solve(r, -(q.T @ residuals))
    except np.linalg.LinAlgError as exc:
        raise NumericalFailure(
            FailureKind.SINGULAR_JACOBIAN, f"normal equations are singular: {exc}", point=beta
        ) from exc


def _run(
    method: str,
    model: Model,
    xdata: Array,
    ydata: Array,
    beta0: Array,
    jacobian: JacobianRule,
    criteria: Optional[ConvergenceCriteria],
    history: bool,
) -> SolveResult:
    crit = criteria if criteria is not None else default_criteria("gauss_newton")
    beta = np.atleast_1d(np.asarray(beta0, dtype=float)).copy()
    if beta.ndim != 1 or beta.size == 0:
        raise ValueError("beta0 must be a non-empty 1-D array")
    check_iterate(beta)
    hist: list[Array] = [beta.copy()] if history else []
    nfev = 0
    njev = 0
    nit = 0
    ssr = float("nan")

    def result(status: Status, message: str) -> SolveResult:
        return SolveResult(
            x=beta.copy(),
            fun=ssr,
            nit=nit,
            status=status,
            message=message,
            nfev=nfev,
            njev=njev,
            history=hist,
        )

    try:
        residuals = _residuals(model, xdata, ydata, beta)
        nfev += 1
        ssr = float(residuals @ residuals)
        while nit < crit.max_iter:
            jac, fev, jev = jacobian(beta)
            nfev += fev
            njev += jev
            delta = _gauss_newton_step(jac, residuals, beta)
            beta_new = beta + delta
            check_iterate(beta_new)
            residuals = _residuals(model, xdata, ydata, beta_new)
            nfev += 1
            ssr_new = float(residuals @ residuals)
            ssr_change = abs(ssr - ssr_new)
            beta, ssr = beta_new, ssr_new
            nit += 1
            if history:
                hist.append(beta.copy())
            step_norm = float(np.linalg.norm(delta))
            logger.debug("%s iter %d: ssr=%.6e |delta|=%.3e", method, nit, ssr, step_norm)
            if crit.step_converged(step_norm, float(np.linalg.norm(beta))):
                return result(Status.CONVERGED, "Step tolerance satisfied.")
            if ssr_change <= crit.tol_residual:
                return result(Status.CONVERGED, "Sum of squares change tolerance satisfied.")
    except NumericalFailure as exc:
        if exc.result is None:
            exc.result = result(Status.NUMERICAL_FAILURE, str(exc))
        logger.warning("%s failed after %d iterations: %s", method, nit, exc)
        raise

    logger.info("%s: maximum iterations (%d) reached, ssr=%.6e", method, crit.max_iter, ssr)
    return result(Status.MAX_ITER, "Maximum iterations reached.")


def _prepare_data(xdata: Array, ydata: Array) -> tuple[Array, Array]:
    xdata = np.asarray(xdata, dtype=float)
    ydata = np.atleast_1d(np.asarray(ydata, dtype=float))
    if ydata.ndim != 1:
        raise ValueError("ydata must be 1-D")
    if xdata.shape[0] != ydata.shape[0]:
        raise ValueError(
            f"xdata has {xdata.shape[0]} samples but ydata has {ydata.shape[0]}"
        )
    return xdata, ydata


def gauss_newton(
    model: Model,
    xdata: Array,
    ydata: Array,
    beta0: Array,
    jac: ModelJacobian,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    history: bool = False,
) -> SolveResult:
    """Gauss-Newton fit with an analytic model Jacobian.

    Parameters
    ----------
    model:
        ``model(xdata, beta)`` returning one prediction per sample.
    xdata, ydata:
        Samples; ``xdata`` may be ``(N,)`` or ``(N, k)``, ``ydata`` is ``(N,)``.
    beta0:
        Initial parameters, shape ``(p,)``.
    jac:
        ``jac(xdata, beta)`` returning the ``(N, p)`` matrix of partial
        derivatives of the predictions with respect to ``beta``.
    criteria:
        Stopping rules; ``tol_step``/``rtol_step`` apply to ``||delta||`` and
        ``tol_residual`` to the change in the sum of squared residuals.

    Returns
    -------
    SolveResult
        ``x`` holds the fitted parameters and ``fun`` the final sum of squared
        residuals.

    Raises
    ------
    NumericalFailure
        ``SINGULAR_JACOBIAN`` when ``J`` is rank deficient (redundant
        parameters or too few distinct samples).
    """
    xdata, ydata = _prepare_data(xdata, ydata)

    def jacobian(beta: Array) -> tuple[Array, int, int]:
        mat = np.asarray(jac(xdata, beta), dtype=float)
        if mat.ndim == 1:
            mat = mat.reshape(-1, 1)
        if mat.shape != (ydata.size, beta.size):
            raise ValueError(
                f"jac returned shape {mat.shape}, expected {(ydata.size, beta.size)}"
            )
        if not np.all(np.isfinite(mat)):
            raise undefined_evaluation(beta, mat)
        return mat, 0, 1

    return _run("gauss_newton", model, xdata, ydata, beta0, jacobian, criteria, history)


def gauss_newton_num(
    model: Model,
    xdata: Array,
    ydata: Array,
    beta0: Array,
    criteria: Optional[ConvergenceCriteria] = None,
    *,
    h: Optional[float | Sequence[float]] = None,
    n_workers: Optional[int] = 1,
    history: bool = False,
) -> SolveResult:
    """Gauss-Newton fit with a central finite-difference Jacobian.

    ``h`` is the step in parameter space (scalar or one per parameter) and
    ``n_workers > 1`` evaluates the Jacobian columns on a thread pool.
    """
    xdata, ydata = _prepare_data(xdata, ydata)

    def residual_vector(beta: Array) -> Array:
        return _residuals(model, xdata, ydata, beta)

    def jacobian(beta: Array) -> tuple[Array, int, int]:
        mat, evals = numeric_jacobian(
            residual_vector, beta, h=h, n_workers=n_workers, return_evals=True
        )
        return mat, evals, 0

    return _run("gauss_newton_num", model, xdata, ydata, beta0, jacobian, criteria, history)


__all__ = ["gauss_newton", "gauss_newton_num"]
