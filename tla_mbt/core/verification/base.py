"""
Base interface for model checker backends.

Each backend (TLC, Apalache) turns a TLA+ file suite into the traces that
violate the suite's configured invariant.
"""

from abc import ABC, abstractmethod
from typing import List

from ..artifacts import TlaFileSuite, TlaTrace
from ...config import ModelatorRuntime


class ModelCheckerBackend(ABC):
    """
    Abstract base class for model checker backends.
    """

    name = "checker"

    def __init__(self, runtime: ModelatorRuntime):
        self.runtime = runtime

    @property
    def mc_runtime(self):
        return self.runtime.model_checker_runtime

    @abstractmethod
    def check(self, suite: TlaFileSuite) -> List[TlaTrace]:
        """
        Run the checker on a suite.

        Args:
            suite: Module, configuration and dependencies to check

        Returns:
            Counterexample traces; empty when the invariant holds
        """
        pass

    @abstractmethod
    def test(self, suite: TlaFileSuite) -> List[TlaTrace]:
        """
        Run a generated test and require at least one trace.

        Raises:
            NoTraceFoundError: the checker found no counterexample
        """
        pass
