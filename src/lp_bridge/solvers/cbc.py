"""The coin-or cbc solver (https://github.com/coin-or/Cbc)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ParseError
from ..lp.format import format_number
from ..schemas import LPProblem, Solution, Status
from .base import SolverProgram, require_content

logger = logging.getLogger(__name__)

# first word of the status line
CBC_STATUS: Dict[str, Status] = {
    "Optimal": "optimal",
    "Infeasible": "infeasible",
    "Integer": "infeasible",  # "Integer infeasible"
    "Unbounded": "unbounded",
    "Stopped": "suboptimal",  # on time, iterations, difficulties or ctrl-c
}


def _read_status(line: str) -> Status:
    words = line.split()
    if not words:
        raise ParseError("Incorrect solution format: the cbc status line is missing.")
    if words[0] == "Optimal" and len(words) > 1 and words[1] == "(within":
        # MIP gap stop: "Optimal (within gap tolerance)"
        return "suboptimal"
    status = CBC_STATUS.get(words[0])
    if status is None:
        logger.warning("Unknown cbc status line %r", line.strip())
        return "not_solved"
    return status


def parse_cbc_solution(report: str, problem: Optional[LPProblem] = None) -> Solution:
    """
    Parse a cbc ``solution`` file.

    The first line carries the status; every following line is
    ``[**] <index> <name> <value> [<reduced cost>]``. cbc leaves out
    zero-valued columns, so when ``problem`` is given its declared
    variables default to 0.
    """

    lines = require_content(report, "cbc").splitlines()
    status = _read_status(lines[0])

    results: Dict[str, float] = {}
    if problem is not None:
        results = {var.name: 0.0 for var in problem.variables}

    for lineno, line in enumerate(lines[1:], start=2):
        fields = line.split()
        if fields and fields[0] == "**":
            fields = fields[1:]
        if not fields:
            continue
        if len(fields) < 3 or not fields[0].isdigit():
            logger.debug("Skipping cbc line %d: %r", lineno, line)
            continue
        try:
            results[fields[1]] = float(fields[2])
        except ValueError:
            logger.debug("Skipping cbc line %d with non-numeric value: %r", lineno, line)

    return Solution(status=status, results=results)


class CbcSolver(SolverProgram):
    dialect = "cbc"
    default_command = "cbc"
    parse_report = staticmethod(parse_cbc_solution)

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = [str(lp_file)]
        if self.options.mip_gap is not None:
            args += ["ratiogap", format_number(self.options.mip_gap)]
        if self.options.max_seconds is not None:
            args += ["seconds", str(self.options.max_seconds)]
        if self.options.threads is not None:
            args += ["threads", str(self.options.threads)]
        args += ["solve", "solution", str(solution_file)]
        return args
