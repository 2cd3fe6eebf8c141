"""Test the transition graph, next states and histories."""

import pytest

from tla_mbt.core.exploration.graph import Graph, NextStates
from tla_mbt.core.exploration.histories import Histories


def test_add_path_inserts_unique_edges():
    """Test that repeated paths do not duplicate edges."""
    graph = Graph()
    graph.add_path([1, 2, 3])
    graph.add_path([1, 2, 3])
    graph.add_path([3, 1])

    assert graph.edges() == [(1, 2), (2, 3), (3, 1)]


def test_all_paths_records_every_prefix():
    """Test that paths of every length up to the bound are returned."""
    graph = Graph()
    graph.add_path([1, 2, 3])

    assert graph.all_paths(1, 3) == {(1,), (1, 2), (1, 2, 3)}
    assert graph.all_paths(1, 2) == {(1,), (1, 2)}
    assert graph.all_paths(2, 5) == {(2,), (2, 3)}


def test_all_paths_follow_cycles():
    """Test that cycles produce longer paths as the bound grows."""
    graph = Graph()
    graph.add_path([1, 2, 1])

    assert graph.all_paths(1, 4) == {(1,), (1, 2), (1, 2, 1), (1, 2, 1, 2)}


def test_all_paths_branching():
    graph = Graph()
    graph.add_path([1, 2])
    graph.add_path([1, 3])

    assert graph.all_paths(1, 2) == {(1,), (1, 2), (1, 3)}


def test_all_paths_empty_cases():
    """Test that an absent start or a zero bound yields nothing."""
    graph = Graph()
    graph.add_path([1, 2])

    assert graph.all_paths(7, 3) == set()
    assert graph.all_paths(1, 0) == set()


def test_next_states_keeps_discovery_order():
    next_states = NextStates()
    assert next_states.get_next_states(1) is None

    next_states.add_next_state(1, 2)
    next_states.add_next_state(1, 3)
    next_states.add_next_state(2, 4)

    assert next_states.get_next_states(1) == [2, 3]
    assert next_states.get_next_states(2) == [4]
    assert next_states.get_next_states(3) is None


def test_next_states_rejects_duplicates():
    """Test that a successor is never recorded twice."""
    next_states = NextStates()
    next_states.add_next_state(1, 2)

    with pytest.raises(AssertionError):
        next_states.add_next_state(1, 2)


def test_next_states_dot():
    """Test the Graphviz rendering of discovered transitions."""
    next_states = NextStates()
    next_states.add_next_state("a", "b")
    next_states.add_next_state("b", "a")

    dot = next_states.dot()
    assert dot.startswith("digraph {")
    assert '0 [ label = "a" ]' in dot
    assert "0 -> 1" in dot and "1 -> 0" in dot


def test_next_states_serialization():
    next_states = NextStates()
    next_states.add_next_state("a", "b")
    next_states.add_next_state("a", "c")

    restored = NextStates.from_dict(next_states.to_dict())
    assert restored.get_next_states("a") == ["b", "c"]


def test_histories_guess_one_step_longer():
    """Test that unobserved histories are guessed through recorded edges."""
    histories = Histories("i")
    histories.add_history(["i", "a"])
    histories.add_history(["i", "b", "i"])

    assert histories.all_histories() == {
        ("i",),
        ("i", "a"),
        ("i", "b"),
        ("i", "b", "i"),
        ("i", "b", "i", "a"),
        ("i", "b", "i", "b"),
    }
