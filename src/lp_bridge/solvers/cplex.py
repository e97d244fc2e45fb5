"""The IBM CPLEX optimizer, driven through its interactive command line."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ParseError
from ..lp.format import format_number
from ..schemas import LPProblem, Solution, Status
from .base import SolverProgram, require_content

logger = logging.getLogger(__name__)

# solutionStatusValue codes written in the <header> element
CPLEX_STATUS: Dict[int, Status] = {
    1: "optimal",  # optimal
    2: "unbounded",  # unbounded
    3: "infeasible",  # infeasible
    10: "suboptimal",  # iteration limit, feasible
    11: "suboptimal",  # time limit, feasible
    101: "optimal",  # integer optimal solution
    102: "suboptimal",  # integer optimal, tolerance
    103: "infeasible",  # integer infeasible
    104: "suboptimal",  # solution limit
    105: "suboptimal",  # node limit, feasible
    106: "suboptimal",  # node limit, infeasible incumbent
    107: "suboptimal",  # time limit, feasible
    113: "suboptimal",  # aborted, feasible
    118: "unbounded",  # integer unbounded
}


def _status_from_header(header: ET.Element) -> Status:
    raw = header.get("solutionStatusValue")
    try:
        code = int(raw) if raw is not None else None
    except ValueError:
        code = None
    status = CPLEX_STATUS.get(code) if code is not None else None
    if status is None:
        logger.warning(
            "Unknown cplex solution status %r (%s)", raw, header.get("solutionStatusString")
        )
        return "not_solved"
    return status


def parse_cplex_solution(report: str, problem: Optional[LPProblem] = None) -> Solution:
    """
    Parse a CPLEX XML solution file.

    The ``<header>`` element holds the status; each ``<variable>`` inside
    ``<variables>`` holds a ``name`` and a ``value`` attribute.
    """

    require_content(report, "cplex")
    try:
        root = ET.fromstring(report)
    except ET.ParseError as exc:
        raise ParseError(f"Incorrect solution format: invalid cplex XML ({exc}).") from exc

    if root.tag == "CPLEXSolutions" and len(root):
        root = root[0]

    header = root.find("header")
    if header is None:
        raise ParseError("Incorrect solution format: cplex report has no <header> element.")
    status = _status_from_header(header)

    results: Dict[str, float] = {}
    variables = root.find("variables")
    if variables is not None:
        for element in variables.iter("variable"):
            name = element.get("name")
            value = element.get("value")
            if name is None or value is None:
                logger.debug("Skipping cplex variable without name or value: %s", element.attrib)
                continue
            try:
                results[name] = float(value)
            except ValueError:
                logger.debug("Skipping cplex variable %s with value %r", name, value)

    return Solution(status=status, results=results)


class CplexSolver(SolverProgram):
    dialect = "cplex"
    default_command = "cplex"
    # cplex picks the output format from the file extension
    solution_suffix = ".sol"
    parse_report = staticmethod(parse_cplex_solution)

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = ["-c", f'READ "{lp_file}"']
        if self.options.mip_gap is not None:
            args.append(f"set mip tolerances mipgap {format_number(self.options.mip_gap)}")
        if self.options.max_seconds is not None:
            args.append(f"set timelimit {self.options.max_seconds}")
        if self.options.threads is not None:
            args.append(f"set threads {self.options.threads}")
        args.append("optimize")
        args.append(f'WRITE "{solution_file}"')
        return args

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        if "No solution exists" in stdout:
            return "infeasible"
        return None
