from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from apkview.domain.errors import ToolExecutionError, ToolLaunchError
from apkview.domain.models import Stage

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolOutput:
    returncode: int
    stdout: str
    stderr: str


@dataclass
class ToolRunner:
    """
    Runs one external decompilation tool and maps its failures to errors.
    A timeout of None waits forever.
    """
    timeout_seconds: Optional[int] = None

    def run(self, stage: Stage, args: Sequence[str]) -> ToolOutput:
        command = [str(a) for a in args]
        LOG.debug("Running %s command: %s", stage.label, " ".join(command))

        try:
            proc = subprocess.run(
                command,
                capture_output=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolExecutionError(
                f"The {stage.label} command timed out after {self.timeout_seconds}s",
                returncode=-1,
                stderr=_decode(e.stderr),
                stage=stage,
            ) from e
        except OSError as e:
            raise ToolLaunchError(f"There was an error when executing the {stage.label} command: {e}",
                                  stage=stage) from e

        output = ToolOutput(
            returncode=proc.returncode,
            stdout=_decode(proc.stdout),
            stderr=_decode(proc.stderr),
        )

        if output.returncode != 0:
            raise ToolExecutionError(
                f"The {stage.label} command returned an error (exit {output.returncode})",
                returncode=output.returncode,
                stderr=output.stderr,
                stage=stage,
            )

        return output


def _decode(raw: bytes | None) -> str:
    return (raw or b"").decode("utf-8", errors="replace")
