"""
Transition graphs used by the state-space explorer.
"""

from collections import OrderedDict
from typing import Dict, Generic, Hashable, Iterable, List, Optional, Set, Tuple, TypeVar

N = TypeVar("N", bound=Hashable)


class Graph(Generic[N]):
    """Directed graph with unique edges; cycles are allowed."""

    def __init__(self):
        # insertion ordered adjacency, for stable DOT output
        self._edges: Dict[N, "OrderedDict[N, None]"] = OrderedDict()

    def add_node(self, node: N) -> None:
        if node not in self._edges:
            self._edges[node] = OrderedDict()

    def add_edge(self, source: N, target: N) -> None:
        self.add_node(source)
        self.add_node(target)
        self._edges[source][target] = None

    def add_path(self, nodes: Iterable[N]) -> None:
        """Insert every consecutive edge of `nodes` (each at most once)."""
        nodes = list(nodes)
        for node in nodes:
            self.add_node(node)
        for source, target in zip(nodes, nodes[1:]):
            self.add_edge(source, target)

    def nodes(self) -> List[N]:
        return list(self._edges)

    def neighbors(self, node: N) -> List[N]:
        return list(self._edges.get(node, ()))

    def edges(self) -> List[Tuple[N, N]]:
        return [(source, target) for source, targets in self._edges.items() for target in targets]

    def __contains__(self, node) -> bool:
        return node in self._edges

    def all_paths(self, start: N, max_len: int) -> Set[Tuple[N, ...]]:
        """
        Every path from `start` with 1 to `max_len` nodes.

        Every prefix of a path is itself recorded, and paths keep going
        through cycles until they reach `max_len` nodes.

        Args:
            start: First node of every path
            max_len: Maximum number of nodes in a path

        Returns:
            Set of paths as tuples; empty if `start` is not in the graph or
            `max_len` is 0
        """
        paths: Set[Tuple[N, ...]] = set()
        if start not in self._edges or max_len <= 0:
            return paths

        pending: List[Tuple[N, ...]] = [(start,)]
        while pending:
            path = pending.pop()
            paths.add(path)
            if len(path) == max_len:
                continue
            for neighbor in self._edges[path[-1]]:
                pending.append(path + (neighbor,))
        return paths

    def dot(self) -> str:
        """Render the graph in Graphviz DOT syntax."""
        index = {node: i for i, node in enumerate(self._edges)}
        lines = ["digraph {"]
        for node, i in index.items():
            label = str(node).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
            lines.append(f'    {i} [ label = "{label}" ]')
        for source, target in self.edges():
            lines.append(f"    {index[source]} -> {index[target]} [ ]")
        lines.append("}")
        return "\n".join(lines) + "\n"


class NextStates(Generic[N]):
    """Confirmed successors of each explored state, in discovery order."""

    def __init__(self):
        self._next_states: Dict[N, List[N]] = {}

    def add_next_state(self, state: N, next_state: N) -> None:
        next_states = self._next_states.setdefault(state, [])
        assert next_state not in next_states, "unexpected repeated next state"
        next_states.append(next_state)

    def get_next_states(self, state: N) -> Optional[List[N]]:
        next_states = self._next_states.get(state)
        return list(next_states) if next_states is not None else None

    def states(self) -> List[N]:
        return list(self._next_states)

    def dot(self) -> str:
        graph: Graph[N] = Graph()
        for state, next_states in self._next_states.items():
            for next_state in next_states:
                graph.add_edge(state, next_state)
        return graph.dot()

    def to_dict(self) -> Dict[N, List[N]]:
        return {state: list(next_states) for state, next_states in self._next_states.items()}

    @classmethod
    def from_dict(cls, data: Dict[N, List[N]]) -> "NextStates[N]":
        next_states = cls()
        for state, successors in data.items():
            for successor in successors:
                next_states.add_next_state(state, successor)
        return next_states
