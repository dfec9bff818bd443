import math

import pytest

from numsolve import (
    ConvergenceCriteria,
    FailureKind,
    InvalidBracketError,
    NumericalFailure,
    Status,
    golden_section_minimize,
)
from numsolve.optimize.golden import INV_PHI, INV_PHI2

SINC_EXP_MIN = -4.54295618675514754103


def sinc_exp(x: float) -> float:
    if x != 0.0:
        return math.sin(x) / x + math.exp(x)
    return 2.0


def test_golden_constants():
    assert INV_PHI == pytest.approx(0.6180339887498949)
    assert INV_PHI2 == pytest.approx(1.0 - INV_PHI)
    assert INV_PHI * INV_PHI == pytest.approx(INV_PHI2)


def test_golden_finds_parabola_vertex():
    res = golden_section_minimize(lambda x: (x - 3.0) ** 2, 0.0, 10.0)
    assert res.converged
    assert abs(res.x - 3.0) < 1e-8
    assert res.fun == pytest.approx((res.x - 3.0) ** 2)
    assert res.bracket.width < 2e-10


def test_golden_on_sinc_plus_exponential():
    res = golden_section_minimize(sinc_exp, -7.0, -1.0)
    assert res.converged
    assert abs(res.x - SINC_EXP_MIN) < 1e-6


def test_golden_width_shrinks_by_inverse_golden_ratio():
    res = golden_section_minimize(lambda x: (x - 3.0) ** 2, 0.0, 10.0, history=True)
    widths = [b.width for b in res.history]
    assert widths[0] == 10.0
    assert len(res.history) == res.nit + 1
    for previous, current in zip(widths, widths[1:]):
        if previous > 1e-6:
            assert current / previous == pytest.approx(INV_PHI, rel=1e-6)


def test_golden_one_evaluation_per_iteration():
    res = golden_section_minimize(lambda x: (x + 1.0) ** 2, -4.0, 4.0)
    # Two interior probes, one per iteration, one at the returned point.
    assert res.nfev == res.nit + 3


def test_golden_reversed_bracket():
    res = golden_section_minimize(lambda x: (x - 3.0) ** 2, 10.0, 0.0)
    assert res.converged
    assert abs(res.x - 3.0) < 1e-8


def test_golden_minimum_at_bracket_edge():
    res = golden_section_minimize(lambda x: x, 0.0, 1.0)
    assert res.converged
    assert 0.0 <= res.x < 1e-9


def test_golden_max_iterations():
    res = golden_section_minimize(
        lambda x: (x - 3.0) ** 2, 0.0, 10.0, ConvergenceCriteria(max_iter=10)
    )
    assert res.status is Status.MAX_ITER
    assert res.nit == 10
    assert res.bracket.width == pytest.approx(10.0 * INV_PHI**10, rel=1e-9)
    assert res.bracket.contains(3.0)


def test_golden_tiny_bracket_converges_immediately():
    res = golden_section_minimize(lambda x: x * x, 1.0, 1.0 + 1e-12)
    assert res.converged
    assert res.nit == 0
    assert res.nfev == 1


@pytest.mark.parametrize("lo, hi", [(2.0, 2.0), (0.0, math.inf), (math.nan, 1.0)])
def test_golden_rejects_degenerate_bracket(lo, hi, counted):
    fun = counted(lambda x: x * x)
    with pytest.raises(InvalidBracketError):
        golden_section_minimize(fun, lo, hi)
    assert fun.calls == 0


def test_golden_undefined_objective():
    with pytest.raises(NumericalFailure) as excinfo:
        golden_section_minimize(lambda x: math.nan, 0.0, 1.0)
    exc = excinfo.value
    assert exc.kind is FailureKind.UNDEFINED_EVALUATION
    assert exc.result.status is Status.NUMERICAL_FAILURE
