"""GNU's glpk solver (https://www.gnu.org/software/glpk/), driven through ``glpsol``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..errors import ParseError
from ..lp.format import format_number
from ..schemas import LPProblem, Solution, Status
from .base import SolverProgram, require_content

logger = logging.getLogger(__name__)

GLPK_STATUS: Dict[str, Status] = {
    "OPTIMAL": "optimal",
    "INTEGER OPTIMAL": "optimal",
    "FEASIBLE": "suboptimal",
    "INTEGER NON-OPTIMAL": "suboptimal",
    "INFEASIBLE (FINAL)": "infeasible",
    "INTEGER EMPTY": "infeasible",
    "UNBOUNDED": "unbounded",
    "INTEGER UNDEFINED": "unbounded",
    "UNDEFINED": "not_solved",
}

GLPK_STDOUT_MARKERS = (
    ("PROBLEM HAS NO PRIMAL FEASIBLE SOLUTION", "infeasible"),
    ("PROBLEM HAS NO INTEGER FEASIBLE SOLUTION", "infeasible"),
    ("LP HAS UNBOUNDED PRIMAL SOLUTION", "unbounded"),
)

# value of the "St" column; continuous columns of a MIP report leave it blank
_COLUMN_STATES = {"B", "NL", "NU", "NF", "NS", "*"}


def _read_header(lines: List[str]) -> Dict[str, str]:
    header: Dict[str, str] = {}
    for line in lines:
        if not line.strip():
            if header:
                break
            continue
        key, sep, value = line.partition(":")
        if sep:
            header[key.strip()] = value.strip()
    return header


def _column_rows(lines: List[str]) -> Iterator[List[str]]:
    idx = 0
    while idx < len(lines) and "Column name" not in lines[idx]:
        idx += 1
    idx += 1
    if idx < len(lines) and lines[idx].lstrip().startswith("---"):
        idx += 1

    while idx < len(lines):
        fields = lines[idx].split()
        idx += 1
        if not fields:
            break
        if len(fields) == 2 and idx < len(lines):
            # long names push the rest of the row onto the next line
            fields += lines[idx].split()
            idx += 1
        yield fields


def parse_glpk_solution(report: str, problem: Optional[LPProblem] = None) -> Solution:
    """
    Parse a ``glpsol --output`` report.

    The status comes from the ``Status:`` field of the header block; values
    come from the ``Activity`` column of the column table.
    """

    lines = require_content(report, "glpk").splitlines()
    header = _read_header(lines)
    if "Status" not in header:
        raise ParseError("Incorrect solution format: no solution status found in glpk report.")

    raw_status = header["Status"]
    status = GLPK_STATUS.get(raw_status)
    if status is None:
        logger.warning("Unknown glpk solution status %r", raw_status)
        status = "not_solved"

    results: Dict[str, float] = {}
    for fields in _column_rows(lines):
        if len(fields) < 3 or not fields[0].isdigit():
            logger.debug("Skipping glpk column row %r", " ".join(fields))
            continue
        rest = fields[2:]
        if rest[0] in _COLUMN_STATES:
            rest = rest[1:]
        if not rest:
            continue
        try:
            results[fields[1]] = float(rest[0])
        except ValueError:
            logger.debug("Skipping glpk column row with non-numeric activity %r", " ".join(fields))

    return Solution(status=status, results=results)


class GlpkSolver(SolverProgram):
    dialect = "glpk"
    default_command = "glpsol"
    parse_report = staticmethod(parse_glpk_solution)

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        self._warn_unsupported("threads")
        args = ["--lp", str(lp_file), "-o", str(solution_file)]
        if self.options.max_seconds is not None:
            args += ["--tmlim", str(self.options.max_seconds)]
        if self.options.mip_gap is not None:
            args += ["--mipgap", format_number(self.options.mip_gap)]
        return args

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        for marker, status in GLPK_STDOUT_MARKERS:
            if marker in stdout:
                return status
        return None
