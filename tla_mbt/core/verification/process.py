"""
Process boundary for the model checkers.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ...errors import InvalidUnicodeError, MissingJavaError, ModelatorIOError

logger = logging.getLogger(__name__)


@dataclass
class CmdOutput:
    """Captured output of a checker invocation."""
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    returncode: int = 0

    @property
    def stdout_text(self) -> str:
        return "\n".join(self.stdout)

    @property
    def stderr_text(self) -> str:
        return "\n".join(self.stderr)


def _decode_lines(data: bytes) -> List[str]:
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise InvalidUnicodeError(data[:80]) from e
    return text.splitlines()


def run_command(cmd: List[str], cwd: Optional[Union[str, Path]] = None) -> CmdOutput:
    """
    Run a checker command to completion.

    Args:
        cmd: Command and arguments
        cwd: Working directory of the process

    Returns:
        CmdOutput with every stdout and stderr line
    """
    logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd})")
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
        )
    except FileNotFoundError as e:
        if cmd and cmd[0] == "java":
            raise MissingJavaError() from e
        raise ModelatorIOError(str(e)) from e
    except OSError as e:
        raise ModelatorIOError(str(e)) from e

    output = CmdOutput(
        stdout=_decode_lines(result.stdout),
        stderr=_decode_lines(result.stderr),
        returncode=result.returncode,
    )
    logger.debug(f"Exit code {output.returncode}, "
                 f"{len(output.stdout)} stdout lines, {len(output.stderr)} stderr lines")
    return output
