"""
Parser for Apalache `counterexample*.tla` files.

Each state of the counterexample is an operator definition `State<N> == ...`
whose body runs until the next blank line, comment, definition or the module
terminator.
"""

import re
from typing import List, Optional, Tuple

from ..artifacts import TlaTrace
from ...errors import InvalidCounterexampleError

STATE_DEF_RE = re.compile(r"^State(\d+)\s*==(.*)$")
DEFINITION_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\(.*\))?\s*==")


def _ends_body(line: str) -> bool:
    stripped = line.strip()
    return (
        not stripped
        or stripped.startswith("(*")
        or stripped.startswith("\\*")
        or stripped.startswith("====")
        or bool(DEFINITION_RE.match(line))
    )


def _state_blocks(content: str) -> List[Tuple[int, List[str]]]:
    blocks: List[Tuple[int, List[str]]] = []
    current: Optional[Tuple[int, List[str]]] = None
    for line in content.splitlines():
        match = STATE_DEF_RE.match(line)
        if match:
            current = (int(match.group(1)), [])
            blocks.append(current)
            rest = match.group(2).strip()
            if rest:
                current[1].append(rest)
            continue
        if current is None:
            continue
        if _ends_body(line):
            current = None
            continue
        current[1].append(line.strip())
    return blocks


def parse_counterexample(content: str) -> TlaTrace:
    """
    Parse the states of an Apalache counterexample.

    Args:
        content: Text of the counterexample module

    Returns:
        The counterexample as a single trace
    """
    blocks = _state_blocks(content)
    if not blocks:
        raise InvalidCounterexampleError("no state definition found")

    trace = TlaTrace()
    expected = blocks[0][0]
    for index, lines in blocks:
        if index != expected:
            raise InvalidCounterexampleError(f"expected State{expected}, found State{index}")
        if not lines:
            raise InvalidCounterexampleError(f"State{index} is empty")
        trace.add("\n".join(lines))
        expected += 1
    return trace
