"""Test incremental next-states discovery against a fake model checker."""

import re

import pytest

from tla_mbt.core.artifacts import TlaFileSuite, TlaTrace, TlaVariables
from tla_mbt.core.cache import NextStatesCache
from tla_mbt.core.exploration.next_states import ExplorationSession, NextStatesExplorer
from tla_mbt.errors import NoTraceFoundError

COUNTER_TLA = """---------- MODULE Counter ----------
EXTENDS Naturals

VARIABLE x

Init == x = 0

Next == x' \\in {x + 1, x + 2} /\\ x' <= 2

====================================
"""

COUNTER_CFG = "INIT Init\nNEXT Next\n"


class FakeTLC:
    """Answers exploration queries for the Counter module."""

    def __init__(self, initial=0, successors=None):
        self.initial = initial
        self.successors = successors if successors is not None else {0: [1, 2], 1: [2], 2: []}
        self.queries = []

    def __call__(self, suite):
        config = suite.tla_config_file.content()
        module = suite.tla_file.content()
        assert suite.dependencies[0].module_name == "Counter", "Explored module must be a dependency"

        if "INVARIANT FindInitialState" in config:
            self.queries.append(("init", None))
            if self.initial is None or not self.successors[self.initial]:
                return []
            first = self.successors[self.initial][0]
            # violated by the first recorded step
            return [TlaTrace([
                f"/\\ nextStates = {{}}\n/\\ x = {self.initial}",
                f"/\\ nextStates = {{[x |-> {first}]}}\n/\\ x = {first}",
            ])]

        assert "INVARIANT Explore" in config
        start = int(re.search(r"InitExplore ==\n    /\\ x = (\d+)", module).group(1))
        known_section = module.split("KnownNextStates ==")[1].split("\nExplore ==")[0]
        known = [int(value) for value in re.findall(r"ExploredState\((\d+)\)", known_section)]
        self.queries.append(("explore", start))

        for successor in self.successors[start]:
            if successor not in known:
                return [TlaTrace([
                    f"/\\ nextStates = {{}}\n/\\ x = {start}",
                    f"/\\ nextStates = {{[x |-> {successor}]}}\n/\\ x = {successor}",
                ])]
        return []


class FakeExtractor:
    def __init__(self):
        self.calls = 0

    def __call__(self, suite):
        self.calls += 1
        return TlaVariables(["x"])


@pytest.fixture
def counter_suite(tmp_path):
    spec_dir = tmp_path / "spec"
    spec_dir.mkdir()
    (spec_dir / "Counter.tla").write_text(COUNTER_TLA)
    (spec_dir / "Counter.cfg").write_text(COUNTER_CFG)
    return TlaFileSuite.from_paths(spec_dir / "Counter.tla", spec_dir / "Counter.cfg")


def make_explorer(tmp_path, tlc=None):
    tlc = tlc or FakeTLC()
    extractor = FakeExtractor()
    explorer = NextStatesExplorer(tlc, extractor, NextStatesCache(tmp_path / "dir"))
    return explorer, tlc, extractor


def test_first_successor_of_initial_state(tmp_path, counter_suite):
    """Test bootstrap followed by a single discovery query."""
    explorer, tlc, extractor = make_explorer(tmp_path)

    states = explorer.next_states(counter_suite)

    assert [state.state for state in states] == ["/\\ x = 1"]
    assert states[0].json == {"x": 1}
    assert tlc.queries == [("init", None), ("explore", 0)]
    assert extractor.calls == 1


def test_all_successors_prove_completeness(tmp_path, counter_suite):
    """Test that asking for more than exist returns every successor."""
    explorer, tlc, _ = make_explorer(tmp_path)

    states = explorer.next_states(counter_suite, count=5)

    assert [state.state for state in states] == ["/\\ x = 1", "/\\ x = 2"]
    assert tlc.queries == [("init", None), ("explore", 0), ("explore", 0), ("explore", 0)]


def test_skip(tmp_path, counter_suite):
    explorer, _, _ = make_explorer(tmp_path)

    states = explorer.next_states(counter_suite, skip=1, count=1)
    assert [state.state for state in states] == ["/\\ x = 2"]


def test_known_successors_answer_without_checker(tmp_path, counter_suite):
    """Test that memoized successors are returned without new queries."""
    explorer, tlc, _ = make_explorer(tmp_path)
    explorer.next_states(counter_suite, count=2)
    queries_before = len(tlc.queries)

    states = explorer.next_states(counter_suite, count=1)

    assert [state.state for state in states] == ["/\\ x = 1"]
    assert len(tlc.queries) == queries_before, "Checker called for a known successor"


def test_session_resumed_from_cache(tmp_path, counter_suite):
    """Test that a new explorer resumes the persisted session."""
    explorer, _, _ = make_explorer(tmp_path)
    explorer.next_states(counter_suite, count=5)

    resumed, tlc, extractor = make_explorer(tmp_path)
    states = resumed.next_states(counter_suite, count=5)

    assert [state.state for state in states] == ["/\\ x = 1", "/\\ x = 2"]
    assert tlc.queries == [], "Completed state must not be explored again"
    assert extractor.calls == 0, "Variables must come from the session"


def test_explicit_start_state(tmp_path, counter_suite):
    """Test exploring from a given state, including one without successors."""
    explorer, tlc, _ = make_explorer(tmp_path)

    assert [s.state for s in explorer.next_states(counter_suite, start_state="/\\ x = 1")] == ["/\\ x = 2"]
    assert explorer.next_states(counter_suite, start_state="/\\ x = 2") == []

    session = explorer.load_session(counter_suite)
    assert "/\\ x = 2" in session.complete
    assert session.initial_state.state == "/\\ x = 0"


def test_every_discovery_is_persisted(tmp_path, counter_suite):
    """Test that one snapshot is written per change of the session."""
    explorer, _, _ = make_explorer(tmp_path)
    explorer.next_states(counter_suite, count=5)

    # bootstrap, two discoveries, completeness
    assert len(explorer.cache.cache.keys()) == 4


def test_no_initial_state(tmp_path, counter_suite):
    explorer, _, _ = make_explorer(tmp_path, FakeTLC(initial=None))

    with pytest.raises(NoTraceFoundError):
        explorer.next_states(counter_suite)


def test_invalid_window(tmp_path, counter_suite):
    explorer, _, _ = make_explorer(tmp_path)

    with pytest.raises(ValueError):
        explorer.next_states(counter_suite, skip=-1)
    with pytest.raises(ValueError):
        explorer.next_states(counter_suite, count=0)


def test_session_histories(tmp_path, counter_suite):
    """Test histories built from the discovered transitions."""
    explorer, _, _ = make_explorer(tmp_path)
    explorer.next_states(counter_suite, count=5)
    explorer.next_states(counter_suite, start_state="/\\ x = 1", count=5)

    session = explorer.load_session(counter_suite)
    histories = session.histories().all_histories()

    assert ("/\\ x = 0", "/\\ x = 1", "/\\ x = 2") in histories
    assert ("/\\ x = 0", "/\\ x = 2") in histories


def test_session_serialization(tmp_path, counter_suite):
    explorer, _, _ = make_explorer(tmp_path)
    explorer.next_states(counter_suite, count=5)

    session = explorer.load_session(counter_suite)
    restored = ExplorationSession.from_dict(session.to_dict())

    assert restored.variables == session.variables
    assert restored.complete == session.complete
    assert restored.next_states.get_next_states("/\\ x = 0") == ["/\\ x = 1", "/\\ x = 2"]


def test_initial_state_is_first_state_of_bootstrap_trace(tmp_path, counter_suite):
    """Test that bootstrap keeps the start of the one-step counterexample."""
    explorer, tlc, _ = make_explorer(tmp_path, FakeTLC(initial=0, successors={0: [2], 2: []}))

    session = explorer.load_session(counter_suite)

    assert session.initial_state.state == "/\\ x = 0"
    assert session.initial_state.json == {"x": 0}
    assert tlc.queries == [("init", None)]


def test_missing_successors_need_one_query(tmp_path, counter_suite):
    """Test that two known successors and count=3 cost exactly one query."""
    successors = {0: [1, 2, 3], 1: [], 2: [], 3: []}
    explorer, tlc, _ = make_explorer(tmp_path, FakeTLC(successors=successors))
    explorer.next_states(counter_suite, count=2)
    assert explorer.load_session(counter_suite).next_states.get_next_states("/\\ x = 0") == [
        "/\\ x = 1", "/\\ x = 2"]
    queries_before = len(tlc.queries)

    states = explorer.next_states(counter_suite, count=3)

    assert [state.state for state in states] == ["/\\ x = 1", "/\\ x = 2", "/\\ x = 3"]
    assert tlc.queries[queries_before:] == [("explore", 0)]


def test_unparseable_state_keeps_empty_json(tmp_path, counter_suite):
    """Test that a state without a JSON form is still returned."""
    class OddTLC(FakeTLC):
        def __call__(self, suite):
            traces = super().__call__(suite)
            if traces and "INVARIANT Explore" in suite.tla_config_file.content():
                start, _ = traces[0].states
                return [TlaTrace([start, "/\\ nextStates = {}\n/\\ x = 1 :> @"])]
            return traces

    explorer, _, _ = make_explorer(tmp_path, OddTLC())

    states = explorer.next_states(counter_suite)

    assert [state.state for state in states] == ["/\\ x = 1 :> @"]
    assert states[0].json == {}


def test_bootstrap_through_tlc_runner(tmp_path, counter_suite, runtime, monkeypatch):
    """Test bootstrap on TLC output as printed for a one-step violation."""
    from conftest import tlc_message
    from tla_mbt.core.verification import tlc_runner
    from tla_mbt.core.verification.process import CmdOutput

    stdout = (
        tlc_message(2110, 1, "Invariant FindInitialState is violated.")
        + tlc_message(2121, 1, "The behavior up to this point is:")
        + tlc_message(2217, 4, "1: <Initial predicate>\n/\\ nextStates = {}\n/\\ x = 0")
        + tlc_message(2217, 4, "2: <NextExplore line 21, col 5 to line 24, col 41 of module Explore_0>\n"
                               "/\\ nextStates = {[x |-> 1]}\n/\\ x = 1")
    )
    commands = []

    def fake_run_command(cmd, cwd=None):
        commands.append(cmd)
        return CmdOutput(stdout=stdout, returncode=12)

    monkeypatch.setattr(tlc_runner, "run_command", fake_run_command)
    tlc = tlc_runner.TLCRunner(runtime)
    explorer = NextStatesExplorer(lambda suite: tlc.check(suite, deadlock=True),
                                  FakeExtractor(), NextStatesCache(tmp_path / "dir"))

    session = explorer.load_session(counter_suite)

    assert session.initial_state.state == "/\\ x = 0"
    assert session.initial_state.json == {"x": 0}
    assert commands[0][-1] == "-deadlock"
