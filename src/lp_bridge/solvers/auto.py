from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..errors import LPBridgeError, ProcessError
from ..schemas import LPProblem, Solution, Variable
from .base import SolverProgram
from .cbc import CbcSolver
from .cplex import CplexSolver
from .glpk import GlpkSolver
from .gurobi import GurobiSolver
from .runner import ProcessRunner

logger = logging.getLogger(__name__)

PROBE_PROBLEM = LPProblem(
    name="probe",
    sense="min",
    objective="x",
    variables=[Variable(name="x", lower_bound=0.0, upper_bound=1.0)],
    constraints=[],
)


def default_solvers(runner: Optional[ProcessRunner] = None) -> List[SolverProgram]:
    return [
        GurobiSolver(runner=runner),
        CplexSolver(runner=runner),
        CbcSolver(runner=runner),
        GlpkSolver(runner=runner),
    ]


class AutoSolver:
    """
    Uses the first installed solver out of ``solvers``.

    A solver counts as installed when it solves a tiny probe problem, which
    avoids writing a large problem to disk for a solver that is missing.
    """

    def __init__(
        self,
        solvers: Optional[Sequence[SolverProgram]] = None,
        runner: Optional[ProcessRunner] = None,
    ) -> None:
        self.solvers = list(solvers) if solvers is not None else default_solvers(runner)

    def is_available(self, solver: SolverProgram) -> bool:
        try:
            solver.run(PROBE_PROBLEM)
        except LPBridgeError as exc:
            logger.debug("%s is not usable: %s", solver.command_name, exc)
            return False
        return True

    def select(self) -> SolverProgram:
        for solver in self.solvers:
            if self.is_available(solver):
                logger.info("Using %s", solver.command_name)
                return solver
        raise ProcessError("No solver available")

    def run(self, problem: LPProblem) -> Solution:
        return self.select().run(problem)
