"""Central finite-difference derivatives, gradients, Jacobians and Hessians.

Everything here is deterministic pure NumPy: for a fixed step and identical
inputs the same numbers come back. Gradient and Jacobian columns only depend
on their own pair of perturbed evaluations, so they may optionally be
computed on a thread pool without changing the result.

Example
-------
>>> import numpy as np
>>> from numsolve.finite_diff import numeric_derivative, numeric_gradient
>>> round(numeric_derivative(np.sin, 0.0), 8)
1.0
>>> numeric_gradient(lambda x: x[0] * x[1], np.array([2.0, 3.0])).round(6)
array([3., 2.])
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence, TypeVar

import numpy as np

from .config import DEFAULTS
from .core import (
    Analytic,
    Array,
    DerivativeSpec,
    Numeric,
    Objective,
    ScalarFunction,
    VectorFunction,
    evaluate,
    evaluate_vector,
)

T = TypeVar("T")


def default_step(x: float | Array, order: int = 1) -> float | Array:
    """Step size scaled to the magnitude of ``x``.

    First derivatives use ``eps**(1/3) * max(1, |x|)`` and second derivatives
    ``eps**(1/4) * max(1, |x|)``, which balance truncation against rounding
    error for the central formulas.
    """
    if order == 1:
        scale = DEFAULTS.fd_order1_scale
    elif order == 2:
        scale = DEFAULTS.fd_order2_scale
    else:
        raise ValueError(f"order must be 1 or 2, got {order}")
    step = scale * np.maximum(1.0, np.abs(x))
    if np.ndim(step) == 0:
        return float(step)
    return step


def _scalar_step(x: float, h: Optional[float], order: int) -> float:
    if h is None:
        return default_step(x, order)
    h = float(h)
    if not np.isfinite(h) or h <= 0:
        raise ValueError("finite-difference step must be positive and finite")
    return h


def _vector_steps(x: Array, h: Optional[float | Sequence[float]], order: int) -> Array:
    if h is None:
        return np.asarray(default_step(x, order), dtype=float)
    steps = np.broadcast_to(np.asarray(h, dtype=float), x.shape).copy()
    if not np.all(np.isfinite(steps)) or np.any(steps <= 0):
        raise ValueError("finite-difference step must be positive and finite")
    return steps


def _map_columns(column: Callable[[int], T], n: int, n_workers: Optional[int]) -> list[T]:
    if n_workers is None or n_workers <= 1 or n <= 1:
        return [column(i) for i in range(n)]
    with ThreadPoolExecutor(max_workers=min(int(n_workers), n)) as pool:
        return list(pool.map(column, range(n)))


def numeric_derivative(
    fun: ScalarFunction,
    x: float,
    h: Optional[float] = None,
    return_evals: bool = False,
) -> float | tuple[float, int]:
    """Central-difference estimate ``(f(x+h) - f(x-h)) / (2h)``.

    Parameters
    ----------
    fun:
        Scalar function of a scalar.
    x:
        Point where the derivative is approximated.
    h:
        Step size; defaults to :func:`default_step`.
    return_evals:
        Also return the number of function evaluations.

    Raises
    ------
    NumericalFailure
        With kind ``UNDEFINED_EVALUATION`` if ``fun`` is not finite at a
        perturbed point.
    """
    x = float(x)
    h = _scalar_step(x, h, order=1)
    deriv = (evaluate(fun, x + h) - evaluate(fun, x - h)) / (2.0 * h)
    if return_evals:
        return deriv, 2
    return deriv


def numeric_second_derivative(
    fun: ScalarFunction,
    x: float,
    h: Optional[float] = None,
    return_evals: bool = False,
) -> float | tuple[float, int]:
    """Central-difference estimate ``(f(x+h) - 2f(x) + f(x-h)) / h**2``."""
    x = float(x)
    h = _scalar_step(x, h, order=2)
    fx = evaluate(fun, x)
    second = (evaluate(fun, x + h) - 2.0 * fx + evaluate(fun, x - h)) / (h * h)
    if return_evals:
        return second, 3
    return second


def numeric_gradient(
    fun: Objective,
    x: Array,
    h: Optional[float | Sequence[float]] = None,
    n_workers: Optional[int] = 1,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Gradient of a scalar function by central differences per coordinate.

    ``h`` may be a scalar or one step per coordinate. ``n_workers > 1``
    evaluates the coordinates on a thread pool.
    """
    x = np.atleast_1d(np.asarray(x, dtype=float))
    steps = _vector_steps(x, h, order=1)

    def column(i: int) -> float:
        ei = np.zeros_like(x)
        ei[i] = steps[i]
        return (evaluate(fun, x + ei) - evaluate(fun, x - ei)) / (2.0 * steps[i])

    grad = np.asarray(_map_columns(column, x.size, n_workers), dtype=float)
    if return_evals:
        return grad, 2 * x.size
    return grad


def numeric_jacobian(
    fun: VectorFunction,
    x: Array,
    h: Optional[float | Sequence[float]] = None,
    n_workers: Optional[int] = 1,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Jacobian ``J[i, j] = d fun_i / d x_j`` of a vector function.

    Column ``j`` is the central difference of ``fun`` along coordinate ``j``;
    the result has shape ``(m, n)`` for ``m`` outputs and ``n`` inputs.
    """
    x = np.atleast_1d(np.asarray(x, dtype=float))
    steps = _vector_steps(x, h, order=1)

    def column(j: int) -> Array:
        ej = np.zeros_like(x)
        ej[j] = steps[j]
        return (evaluate_vector(fun, x + ej) - evaluate_vector(fun, x - ej)) / (2.0 * steps[j])

    cols = _map_columns(column, x.size, n_workers)
    jac = np.column_stack(cols)
    if return_evals:
        return jac, 2 * x.size
    return jac


def numeric_hessian(
    fun: Objective,
    x: Array,
    h: Optional[float | Sequence[float]] = None,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Approximate the Hessian using second-order central differences."""
    x = np.atleast_1d(np.asarray(x, dtype=float))
    steps = _vector_steps(x, h, order=2)
    n = x.size
    hess = np.zeros((n, n), dtype=float)
    fx = evaluate(fun, x)
    evals = 1
    for i in range(n):
        ei = np.zeros_like(x)
        ei[i] = steps[i]
        f_ip = evaluate(fun, x + ei)
        f_im = evaluate(fun, x - ei)
        evals += 2
        hess[i, i] = (f_ip - 2.0 * fx + f_im) / (steps[i] ** 2)
        for j in range(i + 1, n):
            ej = np.zeros_like(x)
            ej[j] = steps[j]
            f_pp = evaluate(fun, x + ei + ej)
            f_pm = evaluate(fun, x + ei - ej)
            f_mp = evaluate(fun, x - ei + ej)
            f_mm = evaluate(fun, x - ei - ej)
            evals += 4
            value = (f_pp - f_pm - f_mp + f_mm) / (4.0 * steps[i] * steps[j])
            hess[i, j] = value
            hess[j, i] = value
    if return_evals:
        return hess, evals
    return hess


def derivative_from_spec(
    spec: DerivativeSpec, fun: ScalarFunction, x: float, order: int = 1
) -> tuple[float, int, int]:
    """Evaluate the ``order``-th derivative of ``fun`` at ``x`` as ``spec`` says.

    Returns the value together with the number of function evaluations and
    of analytic derivative evaluations it cost.
    """
    if isinstance(spec, Analytic):
        return evaluate(spec.fun, x), 0, 1
    if isinstance(spec, Numeric):
        if order == 1:
            value, evals = numeric_derivative(fun, x, spec.step, return_evals=True)
        elif order == 2:
            value, evals = numeric_second_derivative(fun, x, spec.step, return_evals=True)
        else:
            raise ValueError(f"order must be 1 or 2, got {order}")
        return value, evals, 0
    raise TypeError(f"expected Analytic or Numeric derivative spec, got {type(spec).__name__}")


__all__ = [
    "default_step",
    "derivative_from_spec",
    "numeric_derivative",
    "numeric_gradient",
    "numeric_hessian",
    "numeric_jacobian",
    "numeric_second_derivative",
]
