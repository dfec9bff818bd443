"""Tests for selecting solvers by name."""

from __future__ import annotations

import math

import pytest

from numsolve import (
    ROOT_METHODS,
    ConvergenceCriteria,
    FailureKind,
    NumericalFailure,
    Status,
    find_root,
    golden_section_minimize,
    minimize_scalar,
)

ARGS = {
    "newton": dict(x0=1.0, dfun=lambda x: 2.0 * x),
    "newton_num": dict(x0=1.0),
    "halley": dict(x0=1.0, dfun=lambda x: 2.0 * x, d2fun=lambda x: 2.0),
    "halley_num": dict(x0=1.0),
    "secant": dict(x0=1.0, x1=2.0),
    "bisection": dict(bracket=(0.0, 2.0)),
    "ridder": dict(bracket=(0.0, 2.0)),
}


@pytest.mark.parametrize("method", ROOT_METHODS)
def test_find_root_every_method(method: str) -> None:
    res = find_root(method, lambda x: x * x - 2.0, **ARGS[method])
    assert res.converged
    assert abs(res.x - math.sqrt(2.0)) < 1e-10


def test_find_root_is_case_insensitive() -> None:
    res = find_root("Bisection", lambda x: x - 0.5, bracket=(0.0, 2.0))
    assert res.x == 0.5


def test_find_root_passes_criteria_and_history() -> None:
    res = find_root(
        "bisection",
        lambda x: x * x - 2.0,
        bracket=(0.0, 2.0),
        criteria=ConvergenceCriteria(max_iter=3),
        history=True,
    )
    assert res.status is Status.MAX_ITER
    assert len(res.history) == 4


@pytest.mark.parametrize(
    "method, kwargs, missing",
    [
        ("newton", dict(x0=1.0), "dfun"),
        ("halley", dict(x0=1.0, dfun=lambda x: 1.0), "d2fun"),
        ("secant", dict(x0=1.0), "x1"),
        ("ridder", dict(), "bracket"),
    ],
)
def test_find_root_missing_argument(method, kwargs, missing) -> None:
    with pytest.raises(ValueError, match=missing):
        find_root(method, lambda x: x, **kwargs)


def test_find_root_unknown_method() -> None:
    with pytest.raises(ValueError, match="Supported names"):
        find_root("brent", lambda x: x, bracket=(0.0, 1.0))


def test_minimize_scalar_golden() -> None:
    fun = lambda x: (x - 1.0) ** 2  # noqa: E731
    res = minimize_scalar("golden", fun, (-2.0, 4.0))
    direct = golden_section_minimize(fun, -2.0, 4.0)
    assert res == direct
    assert abs(res.x - 1.0) < 1e-8


def test_minimize_scalar_unknown_method() -> None:
    with pytest.raises(ValueError, match="Supported names"):
        minimize_scalar("brent", lambda x: x, (0.0, 1.0))


@pytest.mark.parametrize(
    "method, kwargs",
    [
        ("newton", dict(dfun=lambda x: 1e-3)),
        ("newton_num", dict()),
        ("halley", dict(dfun=lambda x: 1e-3, d2fun=lambda x: 0.0)),
    ],
)
def test_find_root_forwards_min_derivative(method, kwargs) -> None:
    fun = lambda x: 1e-3 * x - 1.0  # noqa: E731
    with pytest.raises(NumericalFailure) as excinfo:
        find_root(method, fun, x0=0.0, min_derivative=1e-2, **kwargs)
    assert excinfo.value.kind in (FailureKind.ZERO_DERIVATIVE, FailureKind.ZERO_DENOMINATOR)
    assert find_root(method, fun, x0=0.0, **kwargs).converged
