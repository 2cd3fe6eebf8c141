"""
Error types raised by tla_mbt.

Every error raised on purpose by this package derives from ModelatorError, so
callers can catch a single type around a trace or next-states request.
Double inserts into a write-once cache are programming errors and raise
AssertionError instead.
"""

from pathlib import Path
from typing import Optional, Union


class ModelatorError(Exception):
    """Base class for all tla_mbt errors."""


class ModelatorIOError(ModelatorError):
    """Filesystem or process I/O failed."""

    def __init__(self, message: str):
        super().__init__(f"IO error: {message}")


class MissingFileError(ModelatorError):
    """A referenced file does not exist."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class InvalidUnicodeError(ModelatorError):
    """A file name or process output is not valid UTF-8."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid unicode: {value!r}")


class InvalidOutputError(ModelatorError):
    """The checker output does not follow the expected protocol."""

    def __init__(self, message: str, log: Optional[Union[str, Path]] = None):
        self.log = log
        detail = f" (log: {log})" if log else ""
        super().__init__(f"Invalid checker output: {message}{detail}")


class NoTraceFoundError(ModelatorError):
    """The checker ran cleanly but produced no trace."""

    def __init__(self, log: Optional[Union[str, Path]] = None):
        self.log = log
        super().__init__(f"No trace found in {log}")


class CheckerFailureError(ModelatorError):
    """The checker reported an error that is not a counterexample."""

    def __init__(self, checker: str, message: str):
        self.checker = checker
        self.message = message
        super().__init__(f"{checker} failure: {message}")


class InvalidCounterexampleError(ModelatorError):
    """An Apalache counterexample file lacks the expected state blocks."""

    def __init__(self, message: str):
        super().__init__(f"Invalid Apalache counterexample: {message}")


class DeserializationError(ModelatorError):
    """A cached blob could not be decoded."""

    def __init__(self, message: str):
        super().__init__(f"JSON parse error: {message}")


class UnrecognizedCheckerError(ModelatorError):
    """A model checker name is not one of the supported backends."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unrecognized checker: {name}")


class NoTestFoundError(ModelatorError):
    """A TLA+ tests module defines no test operator."""

    def __init__(self, path: Union[str, Path]):
        self.path = path
        super().__init__(f"No test found in {path}")


class TlaValueError(ModelatorError):
    """A printed TLA+ state could not be converted to JSON."""

    def __init__(self, message: str, text: str = ""):
        self.text = text
        super().__init__(f"Unable to parse TLA+ value: {message}")


class MissingJavaError(ModelatorIOError):
    """Java is not installed or not on PATH."""

    def __init__(self):
        super().__init__("Missing Java. Please install it.")
