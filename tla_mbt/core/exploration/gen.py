"""
Exploration query generation.

An exploration query is a module `Explore_<unique>` that EXTENDS the explored
module and records, in the auxiliary variable `nextStates`, the successor
reached by a single `Next` step from a start predicate. Checking one of the
invariants below against it makes the model checker reveal either the
initial state or a successor that is not yet known.
"""

import logging
import uuid
from enum import Enum
from typing import Iterable, List, Optional

from ..artifacts import TlaState, TlaVariables, split_state
from ...errors import TlaValueError

logger = logging.getLogger(__name__)

NEXT_STATES_VAR = "nextStates"
INDENT = "    "

CONFIG_KEYWORDS = frozenset([
    "CONSTANT", "CONSTANTS",
    "INIT", "NEXT", "SPECIFICATION",
    "INVARIANT", "INVARIANTS",
    "PROPERTY", "PROPERTIES",
    "SYMMETRY", "VIEW", "ALIAS", "POSTCONDITION",
    "CONSTRAINT", "CONSTRAINTS",
    "ACTION_CONSTRAINT", "ACTION_CONSTRAINTS",
    "CHECK_DEADLOCK",
])

# sections replaced by the explorer's own; deadlock checking stays disabled
REPLACED_CONFIG_SECTIONS = frozenset([
    "INIT", "NEXT", "SPECIFICATION",
    "INVARIANT", "INVARIANTS",
    "PROPERTY", "PROPERTIES",
    "CHECK_DEADLOCK",
])


class ExplorerInvariant(Enum):
    """Invariants an exploration query can check."""
    # violated once the first step from the initial state is recorded
    FIND_INITIAL_STATE = "FindInitialState"
    # violated iff a successor outside KnownNextStates exists
    EXPLORE = "Explore"

    def __str__(self):
        return self.value


def explore_module_name() -> str:
    return f"Explore_{uuid.uuid4().hex}"


def _indent_continuation(value: str, indent: str) -> str:
    lines = value.splitlines()
    return "\n".join([lines[0]] + [indent + line.strip() for line in lines[1:]])


def _start_predicate(start_state: Optional[TlaState]) -> str:
    if start_state is None:
        return f"{INDENT}/\\ Init"
    assignments = split_state(start_state)
    return "\n".join(
        f"{INDENT}/\\ {var} = {_indent_continuation(value, INDENT * 3)}"
        for var, value in assignments.items()
    )


def _explored_state_definition(variables: TlaVariables) -> str:
    args = ", ".join(f"{var}_value" for var in variables)
    fields = f",\n{INDENT * 2}".join(f"{var} |-> {var}_value" for var in variables)
    return f"ExploredState({args}) ==\n{INDENT}[\n{INDENT * 2}{fields}\n{INDENT}]"


def _explored_state_call(values: Iterable[str]) -> str:
    return f"ExploredState({', '.join(values)})"


def _known_next_state_call(variables: TlaVariables, state: TlaState) -> str:
    assignments = split_state(state)
    missing = [var for var in variables if var not in assignments]
    if missing:
        raise TlaValueError(f"state does not assign {', '.join(missing)}", state)
    values = [_indent_continuation(assignments[var], INDENT * 3) for var in variables]
    return _explored_state_call(values)


def generate_explorer_module(name: str, module_name: str, variables: TlaVariables,
                             start_state: Optional[TlaState],
                             known_next_states: Optional[List[TlaState]] = None) -> str:
    """
    Generate the text of an exploration query module.

    Args:
        name: Name of the generated module
        module_name: Name of the explored module, which the query extends
        variables: Variables of the explored module
        start_state: State to explore from; None starts from `Init`
        known_next_states: Successors of `start_state` already discovered

    Returns:
        Module text
    """
    known = [_known_next_state_call(variables, state) for state in known_next_states or []]
    known_set = f",\n{INDENT * 2}".join(known)
    next_call = _explored_state_call(f"{var}'" for var in variables)

    return f"""---------- MODULE {name} ----------

EXTENDS {module_name}

VARIABLE {NEXT_STATES_VAR}

{_explored_state_definition(variables)}

InitExplore ==
{_start_predicate(start_state)}
{INDENT}/\\ {NEXT_STATES_VAR} = {{}}

\\* a single step is recorded: no transition is enabled once {NEXT_STATES_VAR} is set
NextExplore ==
{INDENT}/\\ {NEXT_STATES_VAR} = {{}}
{INDENT}/\\ Next
{INDENT}/\\ {NEXT_STATES_VAR}' = {NEXT_STATES_VAR} \\union {{{next_call}}}

{ExplorerInvariant.FIND_INITIAL_STATE} ==
{INDENT}{NEXT_STATES_VAR} = {{}}

KnownNextStates ==
{INDENT}{{
{INDENT * 2}{known_set}
{INDENT}}}

{ExplorerInvariant.EXPLORE} ==
{INDENT}{NEXT_STATES_VAR} \\subseteq KnownNextStates

====================================
"""


def config_sections(config: str) -> List[List[str]]:
    """
    Split a configuration into keyword sections.

    Lines before the first keyword form a section of their own.
    """
    sections: List[List[str]] = [[]]
    for line in config.splitlines():
        words = line.split()
        if words and words[0] in CONFIG_KEYWORDS:
            sections.append([line])
        else:
            sections[-1].append(line)
    return [section for section in sections if section]


def generate_explorer_config(config: str, invariant: ExplorerInvariant) -> str:
    """
    Generate the configuration of an exploration query.

    Args:
        config: Text of the explored module's configuration
        invariant: Invariant the query checks

    Returns:
        The configuration without its behavior and property sections,
        followed by the explorer's own
    """
    kept = []
    for section in config_sections(config):
        words = section[0].split()
        if words and words[0] in REPLACED_CONFIG_SECTIONS:
            logger.debug(f"Dropping config section {words[0]}")
            continue
        kept.extend(section)
    body = "\n".join(kept).strip()
    return f"{body}\n\nINIT InitExplore\nNEXT NextExplore\nINVARIANT {invariant}\n".lstrip()
