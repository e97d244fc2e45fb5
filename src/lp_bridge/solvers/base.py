from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, ClassVar, List, Optional, Tuple, Union

from ..errors import ParseError, ProcessError
from ..lp.format import to_tmp_file
from ..schemas import Dialect, LPProblem, Solution, SolverOptions, Status
from .runner import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

ReportParser = Callable[[str, Optional[LPProblem]], Solution]


def require_content(report: str, dialect: str) -> str:
    if not report or not report.strip():
        raise ParseError(f"Incorrect solution format: the {dialect} report is empty.")
    return report


class SolverProgram(ABC):
    """
    One external solver: how to call it and how to read what it writes.

    Subclasses set ``dialect``, ``default_command`` and ``parse_report`` and
    build the command line in ``arguments``. Instances are immutable; use
    ``with_options`` to derive a reconfigured copy.
    """

    dialect: ClassVar[Dialect]
    default_command: ClassVar[str]
    solution_suffix: ClassVar[Optional[str]] = None
    parse_report: ClassVar[ReportParser]

    def __init__(
        self,
        options: Optional[SolverOptions] = None,
        runner: Optional[ProcessRunner] = None,
    ) -> None:
        self.options = options or SolverOptions()
        self.runner = runner or SubprocessRunner()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(command_name={self.command_name!r})"

    @property
    def command_name(self) -> str:
        return self.options.command_name or self.default_command

    def with_options(self, **changes: Any) -> "SolverProgram":
        options = SolverOptions.model_validate({**self.options.model_dump(), **changes})
        return type(self)(options, runner=self.runner)

    @abstractmethod
    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        """Command-line arguments that solve ``lp_file`` and write ``solution_file``."""

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        return None

    def read_solution(self, report: str, problem: Optional[LPProblem] = None) -> Solution:
        return type(self).parse_report(report, problem)

    def read_solution_from_path(
        self, path: Union[str, Path], problem: Optional[LPProblem] = None
    ) -> Solution:
        try:
            report = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ParseError(f"Cannot open solution file {path}: {exc}") from exc
        return self.read_solution(report, problem)

    def _warn_unsupported(self, *fields: str) -> None:
        for field in fields:
            if getattr(self.options, field) is not None:
                logger.warning("%s ignores the '%s' option", self.command_name, field)

    def _solution_path(self) -> Tuple[Path, bool]:
        if self.options.solution_file:
            path = Path(self.options.solution_file)
            # drop any report an earlier run left behind
            path.unlink(missing_ok=True)
            return path, False
        fd, name = tempfile.mkstemp(prefix="lp_bridge_", suffix=self.solution_suffix or ".sol")
        os.close(fd)
        # only the name is reserved; the solver creates the file itself
        os.unlink(name)
        return Path(name), True

    def run(self, problem: LPProblem) -> Solution:
        """
        Solve ``problem`` with the external program.

        Raises EncodingError before anything is spawned when the problem has
        no .lp representation, ProcessError when the program fails, and
        ParseError when its report cannot be read.
        """

        lp_file: Optional[Path] = None
        solution_file: Optional[Path] = None
        owns_solution_file = False
        try:
            lp_file = to_tmp_file(problem)
            solution_file, owns_solution_file = self._solution_path()
            args = self.arguments(lp_file, solution_file)
            output = self.runner.execute(self.command_name, args, timeout=self.options.timeout)
            if output.returncode != 0:
                detail = output.stderr.strip() or output.stdout.strip()
                raise ProcessError(
                    f"{self.command_name} exited with status {output.returncode}"
                    + (f": {detail[-500:]}" if detail else "")
                )

            hint = self.parse_stdout_status(output.stdout)
            if hint in ("infeasible", "unbounded"):
                logger.info("%s reported %s on stdout", self.command_name, hint)
                return Solution(status=hint)

            if not solution_file.exists():
                raise ParseError(
                    f"{self.command_name} did not write a solution file. "
                    f"Solver output: {output.stdout[-500:]}"
                )
            try:
                solution = self.read_solution_from_path(solution_file, problem)
            except ParseError as exc:
                raise ParseError(f"{exc} Solver output: {output.stdout[-500:]}") from exc

            if hint is not None:
                solution = solution.model_copy(update={"status": hint})
            return solution
        finally:
            if lp_file is not None:
                lp_file.unlink(missing_ok=True)
            if owns_solution_file and solution_file is not None:
                solution_file.unlink(missing_ok=True)
