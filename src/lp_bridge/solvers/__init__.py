"""Solver adapters and solution report parsers, one per supported program."""

from typing import Dict, Optional, Type

from ..schemas import Dialect, LPProblem, Solution
from .auto import AutoSolver
from .base import ReportParser, SolverProgram
from .cbc import CbcSolver, parse_cbc_solution
from .cplex import CplexSolver, parse_cplex_solution
from .glpk import GlpkSolver, parse_glpk_solution
from .gurobi import GurobiSolver, parse_gurobi_solution
from .runner import ProcessRunner, RunOutput, SubprocessRunner

SOLVERS: Dict[str, Type[SolverProgram]] = {
    cls.dialect: cls for cls in (CbcSolver, GlpkSolver, GurobiSolver, CplexSolver)
}

SOLUTION_PARSERS: Dict[str, ReportParser] = {
    dialect: cls.parse_report for dialect, cls in SOLVERS.items()
}


def parse_solution(
    dialect: Dialect, report: str, problem: Optional[LPProblem] = None
) -> Solution:
    try:
        parser = SOLUTION_PARSERS[dialect]
    except KeyError as exc:
        raise ValueError(f"Unknown solver dialect '{dialect}'.") from exc
    return parser(report, problem)


__all__ = [
    "AutoSolver",
    "CbcSolver",
    "CplexSolver",
    "GlpkSolver",
    "GurobiSolver",
    "ProcessRunner",
    "RunOutput",
    "SOLUTION_PARSERS",
    "SOLVERS",
    "SolverProgram",
    "SubprocessRunner",
    "parse_cbc_solution",
    "parse_cplex_solution",
    "parse_glpk_solution",
    "parse_gurobi_solution",
    "parse_solution",
]
