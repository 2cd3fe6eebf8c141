"""
Printed state conjuncts.

TLC prints a state as one `/\\ var = value` conjunct per variable, values
possibly spanning several indented lines.
"""

import re
from collections import OrderedDict
from typing import Dict, List

from ...errors import TlaValueError
from .trace import TlaState

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _split_conjuncts(state: str) -> List[str]:
    conjuncts = []
    current: List[str] = []
    in_string = False
    i = 0
    while i < len(state):
        char = state[i]
        if in_string:
            current.append(char)
            if char == "\\" and i + 1 < len(state):
                current.append(state[i + 1])
                i += 1
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
            current.append(char)
        elif state.startswith("/\\", i):
            conjuncts.append("".join(current))
            current = []
            i += 1
        else:
            current.append(char)
        i += 1
    conjuncts.append("".join(current))
    return [conjunct.strip() for conjunct in conjuncts if conjunct.strip()]


def split_state(state: TlaState) -> Dict[str, str]:
    """
    Split a printed state into its `var = value` conjuncts.

    Values keep their inner line breaks; the result preserves print order.

    Args:
        state: State text, e.g. "/\\ x = 1\\n/\\ y = <<1, 2>>"

    Returns:
        Ordered mapping variable -> value text
    """
    assignments: Dict[str, str] = OrderedDict()
    for conjunct in _split_conjuncts(state):
        var, sep, value = conjunct.partition("=")
        var = var.strip()
        if not sep or not IDENTIFIER_RE.match(var) or not value.strip():
            raise TlaValueError(f"expected `var = value`, found {conjunct!r}", state)
        if var in assignments:
            raise TlaValueError(f"variable {var} assigned twice", state)
        assignments[var] = value.strip()
    return assignments


def join_state(assignments: Dict[str, str]) -> TlaState:
    """Inverse of split_state, in TLC's print layout."""
    return "\n".join(f"/\\ {var} = {value}" for var, value in assignments.items())


def strip_variable(state: TlaState, var: str) -> TlaState:
    """Remove one variable's conjunct from a printed state."""
    assignments = split_state(state)
    assignments.pop(var, None)
    return join_state(assignments)
