"""
Apalache Runner Module

This module handles running the Apalache model checker: `check` to produce
counterexample traces and `parse` to extract a module's variables.
"""

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from ..artifacts import TlaFileSuite, TlaTrace, TlaVariables
from ...errors import CheckerFailureError, DeserializationError, NoTraceFoundError
from ...utils.fs import read_text
from ...utils.setup_utils import get_apalache_path
from .apalache_output import ApalacheOutput
from .base import ModelCheckerBackend
from .counterexample import parse_counterexample
from .process import run_command

logger = logging.getLogger(__name__)

# generated tests may define a view under this name
TEST_VIEW = "ViewForTestNeg"


class ApalacheRunner(ModelCheckerBackend):
    """
    Handles Apalache model checker execution.
    """

    name = "Apalache"

    def _start_command(self, tmp_dir: Path) -> List[str]:
        return [
            "java",
            f"-DTLA-Library={tmp_dir}",
            f"-Djava.io.tmpdir={tmp_dir}",
            "-jar", str(get_apalache_path(self.runtime.dir)),
        ]

    def build_check_command(self, suite: TlaFileSuite, tmp_dir: Path) -> List[str]:
        cmd = self._start_command(tmp_dir) + [
            "check",
            f"--config={suite.tla_config_file.file_name}",
            f"--max-error={self.mc_runtime.traces_per_test}",
            "--algo=offline",
        ]
        if TEST_VIEW in suite.tla_file.content():
            cmd.append(f"--view={TEST_VIEW}")
        cmd.append(suite.tla_file.file_name)
        return cmd

    def build_parse_command(self, suite: TlaFileSuite, tmp_dir: Path, output_name: str) -> List[str]:
        return self._start_command(tmp_dir) + [
            "parse",
            f"--output={output_name}",
            suite.tla_file.file_name,
        ]

    def _run(self, cmd: List[str], tmp_dir: Path) -> ApalacheOutput:
        output = run_command(cmd, cwd=tmp_dir)
        logger.debug("Apalache stdout:\n" + output.stdout_text)
        logger.debug("Apalache stderr:\n" + output.stderr_text)
        return ApalacheOutput(stdout=output.stdout, stderr=output.stderr)

    def check(self, suite: TlaFileSuite) -> List[TlaTrace]:
        """
        Run `apalache check` on a suite inside a temporary directory.

        Args:
            suite: Module, configuration and dependencies to check

        Returns:
            One trace per counterexample file Apalache reported
        """
        logger.warning(
            f"the following workers option was ignored since apalache is "
            f"single-threaded: {self.mc_runtime.workers}")

        with tempfile.TemporaryDirectory(prefix="tla_mbt_apalache_") as tmp:
            tmp_dir = Path(tmp)
            run_suite = suite.write_to_dir(tmp_dir)
            output = self._run(self.build_check_command(run_suite, tmp_dir), tmp_dir)

            error = output.non_counterexample_error()
            if error is not None:
                raise CheckerFailureError(self.name, error)

            traces = []
            for filename in output.counterexample_filenames():
                # absolute reports stay absolute after the join
                content = read_text(tmp_dir / filename)
                logger.debug(f"Apalache counterexample:\n{content}")
                traces.append(parse_counterexample(content))

        logger.info(f"Apalache on {suite.tla_file.module_name} produced {len(traces)} trace(s)")
        return traces

    def test(self, suite: TlaFileSuite) -> List[TlaTrace]:
        traces = self.check(suite)
        if not traces:
            raise NoTraceFoundError(self.mc_runtime.log)
        return traces

    def tla_variables(self, suite: TlaFileSuite) -> TlaVariables:
        """
        Extract the variables a module declares with `apalache parse`.

        Args:
            suite: Suite whose primary module is parsed

        Returns:
            Declared variable names
        """
        output_name = f"{suite.tla_file.module_name}Parsed.json"
        with tempfile.TemporaryDirectory(prefix="tla_mbt_apalache_") as tmp:
            tmp_dir = Path(tmp)
            run_suite = suite.write_to_dir(tmp_dir)
            output = self._run(self.build_parse_command(run_suite, tmp_dir, output_name), tmp_dir)

            error = output.non_counterexample_error()
            if error is not None:
                raise CheckerFailureError(self.name, error)

            content = read_text(tmp_dir / output_name)

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise DeserializationError(f"{output_name}: {e}") from e
        return TlaVariables(variables_from_parsed_json(parsed))


def variables_from_parsed_json(parsed: Dict[str, Any]) -> List[str]:
    """
    Variable names in the JSON produced by `apalache parse`.

    Supports both the flat `declarations` layout and the `modules` layout of
    newer Apalache releases.
    """
    declarations = list(parsed.get("declarations", []))
    for module in parsed.get("modules", []):
        declarations.extend(module.get("declarations", []))

    names = []
    for declaration in declarations:
        if "variable" in declaration:
            names.append(declaration["variable"])
        elif declaration.get("kind") == "TlaVarDecl":
            names.append(declaration["name"])
    return names
