"""
TLC Runner Module

This module handles running the TLC model checker in `-tool` mode and
turning its output into traces.
"""

import logging
import tempfile
from enum import Enum
from pathlib import Path
from typing import List

from ..artifacts import TlaFileSuite, TlaTrace
from ...errors import (
    CheckerFailureError,
    InvalidOutputError,
    NoTraceFoundError
)
from ...utils.fs import write_text
from ...utils.setup_utils import get_community_modules_path, get_tla_tools_path
from .base import ModelCheckerBackend
from .process import CmdOutput, run_command
from .tlc_output import parse_traces

logger = logging.getLogger(__name__)


class TLCExitCategory(Enum):
    """Outcome of a TLC run, from its exit status (tlc2.output.EC.ExitStatus)"""
    SUCCESS = "success"
    # 10..14: assumption, deadlock, safety, liveness or assert violation
    VIOLATION = "violation"
    # 75..77: a formula could not be evaluated
    EVALUATION_FAILURE = "evaluation failure"
    # 150..153: spec or config parse error, state space too large, system error
    ERROR = "error"
    UNKNOWN = "unknown"


def classify_exit_code(exit_code: int) -> TLCExitCategory:
    if exit_code == 0:
        return TLCExitCategory.SUCCESS
    if 10 <= exit_code <= 14:
        return TLCExitCategory.VIOLATION
    if 75 <= exit_code <= 77:
        return TLCExitCategory.EVALUATION_FAILURE
    if 150 <= exit_code <= 153:
        return TLCExitCategory.ERROR
    return TLCExitCategory.UNKNOWN


class TLCRunner(ModelCheckerBackend):
    """
    Handles TLC model checker execution.
    """

    name = "TLC"

    def build_command(self, suite: TlaFileSuite, deadlock: bool = False) -> List[str]:
        """
        Build the TLC command line for a suite.

        Args:
            suite: Suite to check, already materialized in its run directory
            deadlock: Pass `-deadlock`, which disables deadlock checking

        Returns:
            Command and arguments
        """
        tla_tools = get_tla_tools_path(self.runtime.dir)
        community_modules = get_community_modules_path(self.runtime.dir)
        cmd = [
            "java",
            "-cp", f"{tla_tools}:{community_modules}",
            "tlc2.TLC",
            suite.tla_file.file_name,
            "-config", suite.tla_config_file.file_name,
            "-tool",
            "-workers", str(self.mc_runtime.workers),
        ]
        if deadlock:
            cmd.append("-deadlock")
        return cmd

    def _write_log(self, output: CmdOutput) -> None:
        log = Path(self.mc_runtime.log)
        lines = output.stdout + output.stderr
        write_text(log, "\n".join(lines) + ("\n" if lines else ""))

    def check(self, suite: TlaFileSuite, deadlock: bool = False) -> List[TlaTrace]:
        """
        Run TLC on a suite inside a temporary directory.

        Args:
            suite: Module, configuration and dependencies to check
            deadlock: Disable deadlock checking

        Returns:
            Counterexample traces; empty when the invariant holds
        """
        log = self.mc_runtime.log
        with tempfile.TemporaryDirectory(prefix="tla_mbt_tlc_") as tmp:
            tmp_dir = Path(tmp)
            run_suite = suite.write_to_dir(tmp_dir)
            cmd = self.build_command(run_suite, deadlock=deadlock)
            output = run_command(cmd, cwd=tmp_dir)

        self._write_log(output)

        category = classify_exit_code(output.returncode)
        logger.debug(f"TLC exited with {output.returncode} ({category.value})")

        has_stdout = any(line.strip() for line in output.stdout)
        has_stderr = any(line.strip() for line in output.stderr)
        if has_stdout and not has_stderr:
            traces = parse_traces(output.stdout, log)
            if not traces and category is TLCExitCategory.VIOLATION:
                raise InvalidOutputError(
                    f"TLC exited with {output.returncode} ({category.value}) but printed no trace", log)
            logger.info(f"TLC on {suite.tla_file.module_name} produced {len(traces)} trace(s)")
            return traces
        if has_stderr and not has_stdout:
            raise CheckerFailureError(
                self.name, f"{output.stderr_text.strip()} (exit {output.returncode}: {category.value})")
        if has_stdout and has_stderr:
            raise InvalidOutputError("TLC wrote to both stdout and stderr", log)
        raise InvalidOutputError("TLC produced no output", log)

    def test(self, suite: TlaFileSuite) -> List[TlaTrace]:
        traces = self.check(suite)
        if not traces:
            raise NoTraceFoundError(self.mc_runtime.log)
        return traces
