"""Shared fixtures for the tla_mbt tests."""

from pathlib import Path

import pytest

from tla_mbt.config import ModelCheckerRuntime, ModelatorRuntime

NUMBERS_TLA = """---------- MODULE Numbers ----------
EXTENDS Naturals

VARIABLES a, b

Init ==
    /\\ a = 0
    /\\ b = 0

Next ==
    \\/ /\\ a' = a + 1
       /\\ UNCHANGED b
    \\/ /\\ b' = b + 1
       /\\ UNCHANGED a

====================================
"""

NUMBERS_TEST_TLA = """---------- MODULE NumbersTest ----------
EXTENDS Numbers, Sequences

TestAMax == a = 3
BMinTest == b = 0
Helper == TRUE

====================================
"""

NUMBERS_CFG = """CONSTANTS
    N = 3
INIT Init
NEXT Next
"""


def tlc_message(code, msg_class, body):
    """Lines of one TLC -tool message."""
    return [f"@!@!@STARTMSG {code}:{msg_class} @!@!@"] + body.splitlines() + [f"@!@!@ENDMSG {code} @!@!@"]


@pytest.fixture
def numbers_spec(tmp_path):
    """Numbers.tla, NumbersTest.tla and Numbers.cfg in a spec directory."""
    spec_dir = tmp_path / "spec"
    spec_dir.mkdir()
    (spec_dir / "Numbers.tla").write_text(NUMBERS_TLA)
    (spec_dir / "NumbersTest.tla").write_text(NUMBERS_TEST_TLA)
    (spec_dir / "Numbers.cfg").write_text(NUMBERS_CFG)
    return spec_dir


@pytest.fixture
def runtime(tmp_path):
    """Runtime rooted in a scratch directory."""
    mc_runtime = ModelCheckerRuntime(log=tmp_path / "mc.log")
    return ModelatorRuntime(model_checker_runtime=mc_runtime, dir=tmp_path / "tla_mbt_dir")
