"""
Test generation from TLA+ tests modules.

A test is an operator definition whose name starts or ends with `Test`. For
each test `T` a module is generated that defines `TNeg == ~T`; checking
`TNeg` as an invariant makes the model checker return a behavior satisfying
`T`, which is the trace of the test.
"""

import logging
import re
from pathlib import Path
from typing import List, Tuple, Union

from ..artifacts import TlaConfigFile, TlaFile, TlaFileSuite
from ...errors import NoTestFoundError
from ...utils.fs import write_text

logger = logging.getLogger(__name__)

OPERATOR_DEF_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)(?:\(.*\))?\s*==")


def extract_test_names(content: str) -> List[str]:
    """
    Names of the test operators defined in a module.

    Args:
        content: Tests module text

    Returns:
        Test names in definition order
    """
    names = []
    for line in content.splitlines():
        match = OPERATOR_DEF_RE.match(line)
        if not match:
            continue
        name = match.group(1)
        if (name.startswith("Test") or name.endswith("Test")) and name not in names:
            names.append(name)
    return names


def generated_module_name(module_name: str, test_name: str) -> str:
    return f"{module_name}_{test_name}"


def generate_test_module(name: str, tests_module_name: str, test_name: str) -> str:
    header = f"---------- MODULE {name} ----------"
    return (
        f"{header}\n\n"
        f"EXTENDS {tests_module_name}\n\n"
        f"{test_name}Neg == ~{test_name}\n\n"
        f"{'=' * len(header)}\n"
    )


def generate_test_config(config: str, test_name: str) -> str:
    return f"{config.rstrip()}\n\nINVARIANT {test_name}Neg\n"


def generate_tests(suite: TlaFileSuite,
                   work_dir: Union[str, Path]) -> List[Tuple[str, TlaFileSuite]]:
    """
    Generate one checkable suite per test of a tests module.

    The tests module, its dependencies and the generated files are written
    to `work_dir`, so every generated module can extend the tests module.

    Args:
        suite: Tests module and the configuration its tests run with
        work_dir: Directory to write into

    Returns:
        (test name, suite) pairs in definition order
    """
    test_names = extract_test_names(suite.tla_file.content())
    if not test_names:
        raise NoTestFoundError(suite.tla_file.path)
    logger.info(f"Found {len(test_names)} test(s) in {suite.tla_file.file_name}: {test_names}")

    work_suite = suite.write_to_dir(work_dir)
    work_dir = Path(work_dir)
    config = work_suite.tla_config_file.content()
    dependencies = [work_suite.tla_file] + work_suite.dependencies

    tests = []
    for test_name in test_names:
        name = generated_module_name(work_suite.tla_file.module_name, test_name)
        module_path = work_dir / f"{name}.tla"
        config_path = work_dir / f"{name}.cfg"
        write_text(module_path, generate_test_module(name, work_suite.tla_file.module_name, test_name))
        write_text(config_path, generate_test_config(config, test_name))
        tests.append((test_name, TlaFileSuite(TlaFile(module_path), TlaConfigFile(config_path), dependencies)))
    return tests
