"""
Trace and state artifacts produced by the model checkers.

A state is the literal text the checker printed for one specification state,
a block of `/\\ var = value` conjuncts. Traces are ordered, append-only lists
of such states.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

TlaState = str


class TlaTrace:
    """Ordered, append-only sequence of states."""

    def __init__(self, states: Optional[List[TlaState]] = None):
        self._states: List[TlaState] = list(states or [])

    def add(self, state: TlaState) -> None:
        self._states.append(state)

    @property
    def states(self) -> List[TlaState]:
        return list(self._states)

    def is_empty(self) -> bool:
        return not self._states

    def last(self) -> Optional[TlaState]:
        return self._states[-1] if self._states else None

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[TlaState]:
        return iter(self._states)

    def __getitem__(self, index):
        return self._states[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, TlaTrace):
            return NotImplemented
        return self._states == other._states

    def __hash__(self):
        return hash(tuple(self._states))

    def to_dict(self) -> Dict[str, Any]:
        return {'states': list(self._states)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TlaTrace":
        return cls(list(data['states']))

    def __str__(self):
        return "\n\n".join(self._states)

    def __repr__(self):
        return f"TlaTrace({self._states!r})"


@dataclass
class TlaAndJsonState:
    """A state in both its printed TLA+ form and its JSON form."""
    state: TlaState
    json: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'tla': self.state, 'json': self.json}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TlaAndJsonState":
        return cls(state=data['tla'], json=data.get('json', {}))


# answer of a next-states request
TlaNextStates = List[TlaAndJsonState]


class TlaVariables:
    """Sorted set of specification variable names."""

    def __init__(self, names=()):
        self._names = sorted(set(names))

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name) -> bool:
        return name in self._names

    def __eq__(self, other) -> bool:
        if not isinstance(other, TlaVariables):
            return NotImplemented
        return self._names == other._names

    def to_list(self) -> List[str]:
        return list(self._names)

    def __repr__(self):
        return f"TlaVariables({self._names!r})"
