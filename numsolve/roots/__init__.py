"""Univariate root finders.

Example
-------
>>> from numsolve.roots import bisection_solve, newton_solve
>>> res = newton_solve(lambda x: x * x - 2.0, lambda x: 2.0 * x, 1.0)
>>> round(res.x, 12)
1.414213562373
>>> bisection_solve(lambda x: x * x - 2.0, 0.0, 2.0).converged
True
"""

from .bracketing import bisection_solve, ridder_solve
from .newton import halley_solve, halley_solve_num, newton_solve, newton_solve_num
from .secant import secant_solve

__all__ = [
    "bisection_solve",
    "halley_solve",
    "halley_solve_num",
    "newton_solve",
    "newton_solve_num",
    "ridder_solve",
    "secant_solve",
]
