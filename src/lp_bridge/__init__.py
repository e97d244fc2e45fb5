"""LP Bridge: write problems as .lp files and read back what external solvers report."""

from .errors import EncodingError, LPBridgeError, ParseError, ProcessError
from .lp import write_lp
from .schemas import (
    Constraint,
    LinearExpr,
    LinearTerm,
    LPProblem,
    Solution,
    SolverOptions,
    StrExpression,
    Variable,
)
from .solvers import AutoSolver, CbcSolver, CplexSolver, GlpkSolver, GurobiSolver, parse_solution

__all__ = [
    "AutoSolver",
    "CbcSolver",
    "Constraint",
    "CplexSolver",
    "EncodingError",
    "GlpkSolver",
    "GurobiSolver",
    "LinearExpr",
    "LinearTerm",
    "LPBridgeError",
    "LPProblem",
    "ParseError",
    "ProcessError",
    "Solution",
    "SolverOptions",
    "StrExpression",
    "Variable",
    "parse_solution",
    "write_lp",
]
