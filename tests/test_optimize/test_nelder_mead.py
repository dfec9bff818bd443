import numpy as np
import pytest

from numsolve import (
    ConvergenceCriteria,
    FailureKind,
    NumericalFailure,
    Simplex,
    Status,
    nelder_mead,
)


def rosenbrock(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def test_nelder_mead_rosenbrock():
    res = nelder_mead(rosenbrock, np.array([-1.2, 1.0]))
    assert res.converged
    assert np.allclose(res.x, np.ones(2), atol=1e-3)
    assert res.fun < 1e-6
    assert res.nfev > res.nit


def test_nelder_mead_weighted_quadratic_3d():
    center = np.array([1.0, -2.0, 0.5])
    weights = np.array([1.0, 10.0, 0.5])

    def fun(x: np.ndarray) -> float:
        return float(np.sum(weights * (x - center) ** 2))

    res = nelder_mead(fun, np.zeros(3), initial_step=0.5)
    assert res.converged
    assert np.allclose(res.x, center, atol=1e-4)


def test_nelder_mead_one_dimensional():
    res = nelder_mead(lambda x: (x[0] - 2.0) ** 2, [0.0])
    assert res.converged
    assert res.x.shape == (1,)
    assert abs(res.x[0] - 2.0) < 1e-4


def test_nelder_mead_treats_non_finite_values_as_worst():
    def fun(x: np.ndarray) -> float:
        if x[0] > 1.5:
            return np.nan
        return float((x[0] - 1.0) ** 2 + x[1] ** 2)

    res = nelder_mead(fun, np.array([1.4, 0.3]), initial_step=0.2)
    assert res.converged
    assert np.allclose(res.x, [1.0, 0.0], atol=1e-4)


def test_nelder_mead_all_non_finite_raises():
    with pytest.raises(NumericalFailure) as excinfo:
        nelder_mead(lambda x: np.inf, np.zeros(2))
    exc = excinfo.value
    assert exc.kind is FailureKind.UNDEFINED_EVALUATION
    assert exc.result.status is Status.NUMERICAL_FAILURE


def test_nelder_mead_max_iterations():
    res = nelder_mead(rosenbrock, np.array([-1.2, 1.0]), ConvergenceCriteria(max_iter=10))
    assert res.status is Status.MAX_ITER
    assert res.nit == 10
    assert res.fun <= rosenbrock(np.array([-1.2, 1.0]))


def test_nelder_mead_best_value_never_increases():
    res = nelder_mead(rosenbrock, np.array([-1.2, 1.0]), history=True)
    values = [rosenbrock(x) for x in res.history]
    assert all(b <= a for a, b in zip(values, values[1:]))
    assert len(res.history) == res.nit + 1


def test_nelder_mead_is_deterministic():
    first = nelder_mead(rosenbrock, np.array([-1.2, 1.0]))
    second = nelder_mead(rosenbrock, np.array([-1.2, 1.0]))
    assert np.array_equal(first.x, second.x)
    assert first.nit == second.nit
    assert first.nfev == second.nfev


def test_nelder_mead_does_not_modify_x0():
    x0 = np.array([-1.2, 1.0])
    nelder_mead(rosenbrock, x0, ConvergenceCriteria(max_iter=5))
    assert np.array_equal(x0, [-1.2, 1.0])


@pytest.mark.parametrize("step", [0.0, np.inf])
def test_nelder_mead_rejects_bad_initial_step(step):
    with pytest.raises(ValueError):
        nelder_mead(rosenbrock, np.zeros(2), initial_step=step)


def test_simplex_helpers():
    simplex = Simplex(
        vertices=np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 2.0]]),
        values=np.array([3.0, 1.0, 2.0]),
    )
    simplex.sort()
    assert simplex.dim == 2
    assert np.array_equal(simplex.values, [1.0, 2.0, 3.0])
    assert np.array_equal(simplex.vertices[0], [1.0, 0.0])
    assert np.allclose(simplex.centroid(), [0.5, 1.0])
    assert simplex.spread() == 2.0
    assert simplex.size() == 2.0
    simplex.replace_worst(np.array([0.5, 0.5]), 0.5)
    assert simplex.values[-1] == 0.5


def test_simplex_sort_keeps_order_of_tied_vertices():
    vertices = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    simplex = Simplex(vertices=vertices.copy(), values=np.array([2.0, 1.0, 2.0, 1.0]))
    simplex.sort()
    assert np.array_equal(simplex.values, [1.0, 1.0, 2.0, 2.0])
    assert np.array_equal(simplex.vertices, vertices[[1, 3, 0, 2]])


def test_nelder_mead_tied_values_return_first_vertex():
    res = nelder_mead(lambda x: 0.0, np.array([1.0, 2.0]))
    assert res.converged
    assert res.nit == 0
    assert np.array_equal(res.x, [1.0, 2.0])
