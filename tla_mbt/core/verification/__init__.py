"""
Model checker invocation and output parsing.
"""

from .apalache_output import ApalacheOutput
from .apalache_runner import ApalacheRunner
from .base import ModelCheckerBackend
from .checker import get_available_checkers, get_checker
from .counterexample import parse_counterexample
from .process import CmdOutput, run_command
from .tlc_output import ParsedMessageStream, parse_message_stream, parse_traces
from .tlc_runner import TLCExitCategory, TLCRunner, classify_exit_code

__all__ = [
    "ApalacheOutput",
    "ApalacheRunner",
    "ModelCheckerBackend",
    "get_available_checkers",
    "get_checker",
    "parse_counterexample",
    "CmdOutput",
    "run_command",
    "ParsedMessageStream",
    "parse_message_stream",
    "parse_traces",
    "TLCExitCategory",
    "TLCRunner",
    "classify_exit_code"
]
