from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from pydantic import BaseModel

from ..errors import ProcessError

logger = logging.getLogger(__name__)


class RunOutput(BaseModel):
    returncode: int
    stdout: str = ""
    stderr: str = ""


class ProcessRunner(ABC):
    """Runs a solver executable and captures what it printed."""

    @abstractmethod
    def execute(
        self, command: str, args: Sequence[str], timeout: Optional[float] = None
    ) -> RunOutput:
        """
        Spawn ``command`` with ``args`` and wait for it.

        Raises:
            ProcessError: the program could not be started or did not finish in time.
        """


class SubprocessRunner(ProcessRunner):
    def execute(
        self, command: str, args: Sequence[str], timeout: Optional[float] = None
    ) -> RunOutput:
        argv = [command, *args]
        logger.info("Running %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ProcessError(
                f"Command `{command}` not found. Check that it is installed and in PATH."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProcessError(f"{command} did not finish within {timeout} seconds.") from exc
        except OSError as exc:
            raise ProcessError(f"Error while running {command}: {exc}") from exc

        return RunOutput(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
