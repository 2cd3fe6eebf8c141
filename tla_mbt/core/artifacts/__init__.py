"""
Artifacts exchanged with the model checkers.
"""

from .state import join_state, split_state, strip_variable
from .tla_file import (
    STANDARD_MODULES,
    TlaConfigFile,
    TlaFile,
    TlaFileSuite,
    gather_dependencies,
    parse_extends
)
from .trace import TlaAndJsonState, TlaNextStates, TlaState, TlaTrace, TlaVariables

__all__ = [
    "join_state",
    "split_state",
    "strip_variable",
    "STANDARD_MODULES",
    "TlaConfigFile",
    "TlaFile",
    "TlaFileSuite",
    "gather_dependencies",
    "parse_extends",
    "TlaAndJsonState",
    "TlaNextStates",
    "TlaState",
    "TlaTrace",
    "TlaVariables"
]
