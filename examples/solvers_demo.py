"""
Example: Root finding, minimization and curve fitting with numsolve

Runs every solver family on small textbook problems:
1. Roots of f(x) = sin(x)/x + exp(x) with Newton, secant, bisection and Ridder
2. The minimum of the same function on [-7, -1] by golden-section search
3. The Rosenbrock function minimized by Nelder-Mead
4. An exponential decay fitted by Gauss-Newton
"""

import math

import numpy as np

from numsolve import (
    FailureKind,
    NumericalFailure,
    find_root,
    gauss_newton,
    gauss_newton_num,
    minimize_scalar,
    nelder_mead,
)


def sinc_exp(x: float) -> float:
    if x != 0.0:
        return math.sin(x) / x + math.exp(x)
    return 2.0


def sinc_exp_prime(x: float) -> float:
    if x != 0.0:
        return math.exp(x) + math.cos(x) / x - math.sin(x) / x**2
    return 1.0


def example_root_finding():
    """Example: The same root found by every method."""
    print("=" * 60)
    print("Example 1: Root of sin(x)/x + exp(x)")
    print("=" * 60)

    runs = {
        "newton": dict(x0=1.0, dfun=sinc_exp_prime),
        "newton_num": dict(x0=1.0),
        "halley_num": dict(x0=-3.0),
        "secant": dict(x0=-1.0, x1=1.0),
        "bisection": dict(bracket=(-5.0, 1.0)),
        "ridder": dict(bracket=(-5.0, 1.0)),
    }
    for method, kwargs in runs.items():
        res = find_root(method, sinc_exp, **kwargs)
        print(
            f"{method:>11}: x = {res.x:.15f}  f(x) = {res.fun: .2e}  "
            f"iterations = {res.nit:3d}  evaluations = {res.nfev}"
        )

    try:
        find_root("newton", lambda x: x * x + 1.0, x0=0.0, dfun=lambda x: 2.0 * x)
    except NumericalFailure as exc:
        assert exc.kind is FailureKind.ZERO_DERIVATIVE
        print(f"Newton on x^2 + 1 from 0 stops with: {exc}")
    print()


def example_golden_section():
    """Example: Minimum of a unimodal function on a bracket."""
    print("=" * 60)
    print("Example 2: Golden-section search on [-7, -1]")
    print("=" * 60)

    res = minimize_scalar("golden", sinc_exp, (-7.0, -1.0))
    print(f"Status: {res.status}")
    print(f"Minimum at x = {res.x:.12f}, f(x) = {res.fun:.12f}")
    print(f"Iterations: {res.nit}")
    print()


def example_nelder_mead():
    """Example: Derivative-free minimization of the Rosenbrock function."""
    print("=" * 60)
    print("Example 3: Nelder-Mead on the Rosenbrock function")
    print("=" * 60)

    def rosenbrock(x: np.ndarray) -> float:
        return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2

    res = nelder_mead(rosenbrock, np.array([-1.2, 1.0]))
    print(f"Status: {res.status}")
    print(f"Minimizer: {res.x}")
    print(f"Objective: {res.fun:.3e}")
    print(f"Iterations: {res.nit}, evaluations: {res.nfev}")
    print()


def example_curve_fitting():
    """Example: Fitting y = a * exp(-k x) to noisy samples."""
    print("=" * 60)
    print("Example 4: Gauss-Newton fit of an exponential decay")
    print("=" * 60)

    def model(x: np.ndarray, beta: np.ndarray) -> np.ndarray:
        return beta[0] * np.exp(-beta[1] * x)

    def jac(x: np.ndarray, beta: np.ndarray) -> np.ndarray:
        e = np.exp(-beta[1] * x)
        return np.column_stack([e, -beta[0] * x * e])

    rng = np.random.default_rng(42)
    x = np.linspace(0.0, 4.0, 30)
    y = model(x, np.array([2.0, 0.5])) + 0.02 * rng.standard_normal(x.size)

    res = gauss_newton(model, x, y, np.array([1.5, 0.4]), jac)
    res_num = gauss_newton_num(model, x, y, np.array([1.5, 0.4]), n_workers=2)
    print(f"Analytic Jacobian:  a = {res.x[0]:.6f}, k = {res.x[1]:.6f}, SSR = {res.fun:.3e}")
    print(f"Numeric Jacobian:   a = {res_num.x[0]:.6f}, k = {res_num.x[1]:.6f}")
    print()


if __name__ == "__main__":
    example_root_finding()
    example_golden_section()
    example_nelder_mead()
    example_curve_fitting()
    print("All examples completed.")
