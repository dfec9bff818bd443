"""Derivative-free minimizers and nonlinear least squares.

Example
-------
>>> import numpy as np
>>> from numsolve.optimize import nelder_mead
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> res = nelder_mead(rosen, np.array([-1.2, 1.0]))
>>> np.allclose(res.x, [1.0, 1.0], atol=1e-3)
True
"""

from .golden import golden_section_minimize
from .least_squares import gauss_newton, gauss_newton_num
from .nelder_mead import Simplex, nelder_mead

__all__ = [
    "Simplex",
    "gauss_newton",
    "gauss_newton_num",
    "golden_section_minimize",
    "nelder_mead",
]
