import math

import numpy as np
import pytest

from numsolve import (
    ROOT_METHODS,
    find_root,
    gauss_newton,
    gauss_newton_num,
    golden_section_minimize,
    nelder_mead,
)

HIMMELBLAU_MINIMA = np.array(
    [
        [3.0, 2.0],
        [-2.805118, 3.131312],
        [-3.779310, -3.283186],
        [3.584428, -1.848126],
    ]
)


def himmelblau(x: np.ndarray) -> float:
    return (x[0] ** 2 + x[1] - 11) ** 2 + (x[0] + x[1] ** 2 - 7) ** 2


def rosenbrock_residuals(_: np.ndarray, beta: np.ndarray) -> np.ndarray:
    return np.array([10 * (beta[1] - beta[0] ** 2), 1 - beta[0]])


def rosenbrock_residuals_jac(_: np.ndarray, beta: np.ndarray) -> np.ndarray:
    return np.array([[-20 * beta[0], 10.0], [-1.0, 0.0]])


def kepler(e: float, mean_anomaly: float):
    def fun(E: float) -> float:
        return E - e * math.sin(E) - mean_anomaly

    def dfun(E: float) -> float:
        return 1 - e * math.cos(E)

    def d2fun(E: float) -> float:
        return e * math.sin(E)

    return fun, dfun, d2fun


@pytest.mark.parametrize("method", ROOT_METHODS)
@pytest.mark.parametrize("e", [0.1, 0.5, 0.9])
def test_kepler_equation_all_root_methods(method, e):
    mean_anomaly = 1.0
    fun, dfun, d2fun = kepler(e, mean_anomaly)
    kwargs = {
        "newton": dict(x0=math.pi, dfun=dfun),
        "newton_num": dict(x0=math.pi),
        "halley": dict(x0=math.pi, dfun=dfun, d2fun=d2fun),
        "halley_num": dict(x0=math.pi),
        "secant": dict(x0=mean_anomaly, x1=math.pi),
        "bisection": dict(bracket=(0.0, math.pi)),
        "ridder": dict(bracket=(0.0, math.pi)),
    }[method]
    res = find_root(method, fun, **kwargs)
    assert res.converged
    assert abs(fun(res.x)) < 1e-10
    assert 0.0 <= res.x <= math.pi


@pytest.mark.parametrize("x0", [[0.0, 0.0], [-1.0, 1.0], [-2.0, -2.0], [2.0, -1.0]])
def test_nelder_mead_reaches_a_himmelblau_minimum(x0):
    res = nelder_mead(himmelblau, np.array(x0), initial_step=0.5)
    assert res.converged
    assert res.fun < 1e-8
    distances = np.linalg.norm(HIMMELBLAU_MINIMA - res.x, axis=1)
    assert distances.min() < 1e-4


def test_gauss_newton_on_rosenbrock_residuals():
    dummy = np.zeros(2)
    beta0 = np.array([-1.2, 1.0])
    res = gauss_newton(
        rosenbrock_residuals, dummy, np.zeros(2), beta0, rosenbrock_residuals_jac
    )
    res_num = gauss_newton_num(rosenbrock_residuals, dummy, np.zeros(2), beta0)
    for r in (res, res_num):
        assert r.converged
        assert np.allclose(r.x, np.ones(2), atol=1e-8)
        assert r.nit <= 6


def test_golden_section_on_shifted_cosine():
    res = golden_section_minimize(lambda x: -math.cos(x - 0.3), -1.0, 2.0)
    assert res.converged
    assert abs(res.x - 0.3) < 1e-6
