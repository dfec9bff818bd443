"""numsolve - iterative root finding, minimization and least squares in NumPy."""

__version__ = "0.1.0"

# Configuration
from .config import DEFAULTS, ConvergenceCriteria, Defaults, default_criteria

# Core types
from .core import (
    Analytic,
    Bracket,
    DerivativeSpec,
    Numeric,
    SolveResult,
    Status,
    cancellable,
)

# Errors
from .errors import FailureKind, InvalidBracketError, NumericalFailure, SolverError

# Method selection by name
from .factory import ROOT_METHODS, SCALAR_MINIMIZERS, find_root, minimize_scalar

# Finite differences
from .finite_diff import (
    default_step,
    numeric_derivative,
    numeric_gradient,
    numeric_hessian,
    numeric_jacobian,
    numeric_second_derivative,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Minimization and least squares
from .optimize import (
    Simplex,
    gauss_newton,
    gauss_newton_num,
    golden_section_minimize,
    nelder_mead,
)

# Root finding
from .roots import (
    bisection_solve,
    halley_solve,
    halley_solve_num,
    newton_solve,
    newton_solve_num,
    ridder_solve,
    secant_solve,
)

__all__ = [
    "Analytic",
    "Bracket",
    "ConvergenceCriteria",
    "DEFAULTS",
    "Defaults",
    "DerivativeSpec",
    "FailureKind",
    "InvalidBracketError",
    "Numeric",
    "NumericalFailure",
    "ROOT_METHODS",
    "SCALAR_MINIMIZERS",
    "Simplex",
    "SolveResult",
    "SolverError",
    "Status",
    "__version__",
    "bisection_solve",
    "cancellable",
    "configure_logging",
    "default_criteria",
    "default_step",
    "find_root",
    "gauss_newton",
    "gauss_newton_num",
    "get_logger",
    "golden_section_minimize",
    "halley_solve",
    "halley_solve_num",
    "minimize_scalar",
    "nelder_mead",
    "newton_solve",
    "newton_solve_num",
    "numeric_derivative",
    "numeric_gradient",
    "numeric_hessian",
    "numeric_jacobian",
    "numeric_second_derivative",
    "ridder_solve",
    "secant_solve",
    "set_log_level",
]
