"""
State-space exploration with the model checker as an oracle.
"""

from .gen import ExplorerInvariant, generate_explorer_config, generate_explorer_module
from .graph import Graph, NextStates
from .histories import Histories
from .next_states import ExplorationSession, NextStatesExplorer

__all__ = [
    "ExplorerInvariant",
    "generate_explorer_config",
    "generate_explorer_module",
    "Graph",
    "NextStates",
    "Histories",
    "ExplorationSession",
    "NextStatesExplorer"
]
