import pytest

from numsolve import DEFAULTS, ConvergenceCriteria, default_criteria


def test_default_criteria_values():
    crit = ConvergenceCriteria()
    assert crit.tol_residual == DEFAULTS.tol_residual
    assert crit.tol_step == DEFAULTS.tol_step
    assert crit.rtol_step == 0.0
    assert crit.max_iter == DEFAULTS.max_iter


def test_replace_returns_new_instance():
    crit = ConvergenceCriteria()
    loose = crit.replace(tol_step=1e-6, max_iter=10)
    assert loose.tol_step == 1e-6
    assert loose.max_iter == 10
    assert crit.tol_step == DEFAULTS.tol_step
    with pytest.raises(AttributeError):
        crit.max_iter = 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tol_residual": -1.0},
        {"tol_step": float("nan")},
        {"rtol_step": float("inf")},
        {"max_iter": -1},
        {"max_iter": 2.5},
        {"max_iter": True},
    ],
)
def test_invalid_criteria_rejected(kwargs):
    with pytest.raises(ValueError):
        ConvergenceCriteria(**kwargs)


def test_step_converged_absolute_and_relative():
    crit = ConvergenceCriteria(tol_step=1e-8, rtol_step=1e-6)
    assert crit.step_converged(1e-8, 0.0)
    assert not crit.step_converged(2e-8, 0.0)
    assert crit.step_converged(-5e-6, 10.0)
    assert not crit.step_converged(5e-5, 10.0)


@pytest.mark.parametrize(
    "method, max_iter",
    [
        ("newton", 100),
        ("newton_num", 100),
        ("halley_num", 100),
        ("secant", 100),
        ("bisection", 200),
        ("ridder", 200),
        ("golden", 200),
        ("nelder_mead", 5000),
        ("gauss_newton_num", 50),
    ],
)
def test_method_defaults(method, max_iter):
    assert default_criteria(method).max_iter == max_iter


def test_unknown_method_has_no_defaults():
    with pytest.raises(ValueError, match="Supported methods"):
        default_criteria("laguerre")
