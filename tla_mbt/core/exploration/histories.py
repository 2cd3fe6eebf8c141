"""
Histories observed by the checker, and guesses of the ones it did not print.
"""

from typing import List, Set, Tuple

from ..artifacts import TlaState
from .graph import Graph


class Histories:
    """Checker-observed histories starting at a common initial state."""

    def __init__(self, initial_state: TlaState):
        self.initial_state = initial_state
        self.graph: Graph[TlaState] = Graph()
        self.max_history_len = 0

    def add_history(self, history: List[TlaState]) -> None:
        self.max_history_len = max(self.max_history_len, len(history))
        self.graph.add_path(history)

    def all_histories(self) -> Set[Tuple[TlaState, ...]]:
        """Every history the recorded edges allow, one step longer than the longest seen."""
        return self.graph.all_paths(self.initial_state, self.max_history_len + 1)
