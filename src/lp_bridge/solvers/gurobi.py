"""The proprietary gurobi solver, driven through ``gurobi_cl``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..lp.format import format_number
from ..schemas import LPProblem, Solution, Status
from .base import SolverProgram, require_content

logger = logging.getLogger(__name__)

# checked in order against gurobi_cl's stdout
GUROBI_STDOUT_MARKERS = (
    ("Optimal solution found", "optimal"),
    ("infeasible", "infeasible"),
    ("unbounded", "unbounded"),
    ("Time limit reached", "suboptimal"),
)


def parse_gurobi_solution(report: str, problem: Optional[LPProblem] = None) -> Solution:
    """
    Parse a gurobi ``.sol`` file: ``#`` comments, then ``<name> <value>`` lines.

    The file carries no status. A report with at least one value line is
    optimal; a report with none is ``not_solved``.
    """

    lines = require_content(report, "gurobi").splitlines()
    results: Dict[str, float] = {}
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        # gurobi >= 7 writes a commented header
        if not stripped or stripped.startswith("#"):
            continue
        fields = stripped.split()
        if len(fields) < 2:
            logger.debug("Skipping gurobi line %d: %r", lineno, line)
            continue
        try:
            results[fields[0]] = float(fields[1])
        except ValueError:
            logger.debug("Skipping gurobi line %d with non-numeric value: %r", lineno, line)

    status: Status = "optimal" if results else "not_solved"
    return Solution(status=status, results=results)


class GurobiSolver(SolverProgram):
    dialect = "gurobi"
    default_command = "gurobi_cl"
    parse_report = staticmethod(parse_gurobi_solution)

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = [f"ResultFile={solution_file}"]
        if self.options.mip_gap is not None:
            args.append(f"MIPGap={format_number(self.options.mip_gap)}")
        if self.options.max_seconds is not None:
            args.append(f"TimeLimit={self.options.max_seconds}")
        if self.options.threads is not None:
            args.append(f"Threads={self.options.threads}")
        args.append(str(lp_file))
        return args

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        for marker, status in GUROBI_STDOUT_MARKERS:
            if marker in stdout:
                return status
        return None
