"""
tla_mbt: Model-Based Testing with TLA+

Drives the TLC and Apalache model checkers to generate execution traces from
TLA+ specifications, caches them on disk, and explores a specification's
state space one successor at a time.
"""

__version__ = "0.1.0"

from .config import ConfigManager, ModelChecker, ModelatorRuntime
from .errors import ModelatorError
from .pipeline import next_states, traces

__all__ = [
    "ModelChecker",
    "ModelatorRuntime",
    "ConfigManager",
    "ModelatorError",
    "next_states",
    "traces"
]
