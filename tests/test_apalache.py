"""Test Apalache counterexample and stdout parsing."""

import pytest

from tla_mbt.core.verification.apalache_output import ApalacheOutput
from tla_mbt.core.verification.apalache_runner import variables_from_parsed_json
from tla_mbt.core.verification.counterexample import parse_counterexample
from tla_mbt.errors import InvalidCounterexampleError

COUNTEREXAMPLE = """---------------------------- MODULE counterexample ----------------------------

EXTENDS NumbersTest_TestAMax

(* Constant initialization state *)
ConstInit == TRUE

(* Initial state *)
State0 ==
/\\ a = 0
/\\ b = 0

(* Transition 0 to State1 *)
State1 ==
/\\ a = 1
/\\ b = 0

(* The following formula holds true in the last state and violates the invariant *)
InvariantViolation == a = 1

================================================================================
"""


def test_counterexample_states_in_order():
    """Test that every State<N> block becomes a state of one trace."""
    trace = parse_counterexample(COUNTEREXAMPLE)

    assert trace.states == ["/\\ a = 0\n/\\ b = 0", "/\\ a = 1\n/\\ b = 0"]


def test_counterexample_inline_state():
    """Test a state body written on the definition line."""
    content = "State1 == x = 1 /\\ y = 2\nState2 == x = 2 /\\ y = 2\n====\n"
    trace = parse_counterexample(content)

    assert trace.states == ["x = 1 /\\ y = 2", "x = 2 /\\ y = 2"]


def test_counterexample_without_states():
    """Test that a file with no state block is rejected."""
    with pytest.raises(InvalidCounterexampleError):
        parse_counterexample("---- MODULE counterexample ----\nConstInit == TRUE\n====\n")


def test_counterexample_non_consecutive_states():
    """Test that a gap in the state indices is rejected."""
    content = "State0 ==\n/\\ x = 0\n\nState2 ==\n/\\ x = 2\n\n====\n"
    with pytest.raises(InvalidCounterexampleError):
        parse_counterexample(content)


def test_counterexample_empty_state():
    """Test that a state block without body is rejected."""
    with pytest.raises(InvalidCounterexampleError):
        parse_counterexample("State0 ==\n\n====\n")


def test_counterexample_filenames_deduplicated():
    """Test that reported counterexample files are listed once, in order."""
    output = ApalacheOutput(stdout=[
        "PASS #13: BoundedChecker",
        "State 1: state invariant 0 violated. Check the counterexample in: counterexample1.tla, MC1.out, counterexample1.json",
        "Check an example state in: counterexample1.tla",
        "State 2: state invariant 0 violated. Check the counterexample in: /tmp/run/counterexample2.tla",
        "EXITCODE: ERROR (12)",
    ])

    assert output.counterexample_filenames() == ["counterexample1.tla", "/tmp/run/counterexample2.tla"]
    assert output.non_counterexample_error() is None


def test_non_counterexample_error():
    """Test that a failure without counterexample returns the output text."""
    output = ApalacheOutput(stdout=["Parsing file Foo.tla", "Error by TLA+ parser", "EXITCODE: ERROR (255)"])

    assert output.non_counterexample_error() == "Parsing file Foo.tla\nError by TLA+ parser\nEXITCODE: ERROR (255)"
    assert ApalacheOutput(stdout=["EXITCODE: OK"]).non_counterexample_error() is None


def test_variables_from_parsed_json():
    """Test both layouts of `apalache parse` JSON output."""
    flat = {"declarations": [{"variable": "a"}, {"operator": "Init"}, {"variable": "b"}]}
    modules = {"modules": [{"declarations": [
        {"kind": "TlaVarDecl", "name": "x"},
        {"kind": "TlaOperDecl", "name": "Next"},
    ]}]}

    assert variables_from_parsed_json(flat) == ["a", "b"]
    assert variables_from_parsed_json(modules) == ["x"]
