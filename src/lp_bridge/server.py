from __future__ import annotations

import logging
import os
from typing import Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .errors import LPBridgeError
from .lp.format import write_lp
from .schemas import Dialect, LPProblem, SolverOptions
from .solvers import SOLVERS, AutoSolver, parse_solution

logger = logging.getLogger(__name__)

AUTO_ORDER = ("gurobi", "cplex", "cbc", "glpk")

app = FastMCP("LP Bridge")

# only meaningful for one named solver
_SINGLE_SOLVER_OPTIONS = ("command_name", "solution_file")


def _auto_options(options: SolverOptions) -> SolverOptions:
    dropped = [field for field in _SINGLE_SOLVER_OPTIONS if getattr(options, field) is not None]
    if dropped:
        logger.warning("Ignoring %s when choosing a solver automatically", ", ".join(dropped))
    return options.model_copy(update={field: None for field in _SINGLE_SOLVER_OPTIONS})


@app.tool()
def write_lp_file(problem: LPProblem) -> dict:
    """Serialise a problem to .lp text accepted by cbc, glpk, gurobi and cplex."""
    try:
        return {"lp": write_lp(problem)}
    except LPBridgeError as e:
        return {"error": f"Failed to encode problem: {e}", "lp": None}


@app.tool()
def parse_solver_report(
    dialect: Dialect,
    report: str,
    problem: LPProblem | None = None,
) -> dict:
    """
    Normalise a solver's raw solution report into a status and variable values.

    Args:
        dialect: Which program wrote the report ('cbc', 'glpk', 'gurobi', 'cplex').
        report: Full text of the solution file.
        problem: Optional original problem. cbc omits zero-valued variables;
            with the problem given they are reported as 0.
    """
    try:
        return {"solution": parse_solution(dialect, report, problem).model_dump()}
    except LPBridgeError as e:
        return {"error": f"Failed to parse report: {e}", "solution": None}


@app.tool()
def solve_problem(
    problem: LPProblem,
    solver: Literal["auto", "cbc", "glpk", "gurobi", "cplex"] = "auto",
    options: SolverOptions | None = None,
) -> dict:
    """
    Write the problem to an .lp file, run an installed solver on it and
    return the normalised solution.

    With solver='auto' the first of gurobi, cplex, cbc and glpk found on this
    machine is used; the command_name and solution_file options are ignored
    in that mode.
    """
    opts = options or SolverOptions()
    try:
        if solver == "auto":
            shared = _auto_options(opts)
            solution = AutoSolver([SOLVERS[name](shared) for name in AUTO_ORDER]).run(problem)
        else:
            solution = SOLVERS[solver](opts).run(problem)
    except LPBridgeError as e:
        logger.warning("Solving '%s' with %s failed: %s", problem.name, solver, e)
        return {
            "error": f"Failed to solve problem: {e}",
            "error_type": type(e).__name__,
            "solution": None,
        }

    return {"solver": solver, "solution": solution.model_dump()}


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        port = int(os.environ.get("PORT", "8081"))
        app.settings.host = "0.0.0.0"
        app.settings.port = port
        app.settings.streamable_http_path = "/mcp"
        app.settings.transport_security = TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
            allowed_hosts=["*"],
            allowed_origins=["*"],
        )
        app.run(transport="streamable-http")
