"""
Model checker registry.

Maps each supported ModelChecker to the backend class that drives it.
"""

import logging
from typing import Dict, Type

from ...config import ModelChecker, ModelatorRuntime
from .apalache_runner import ApalacheRunner
from .base import ModelCheckerBackend
from .tlc_runner import TLCRunner

logger = logging.getLogger(__name__)


class CheckerRegistry:
    """
    Registry of model checker backends.
    """

    def __init__(self):
        self._backends: Dict[ModelChecker, Type[ModelCheckerBackend]] = {}

    def register(self, model_checker: ModelChecker, backend: Type[ModelCheckerBackend]) -> None:
        self._backends[model_checker] = backend

    def get_backend(self, model_checker: ModelChecker) -> Type[ModelCheckerBackend]:
        return self._backends[model_checker]

    def get_available_checkers(self) -> Dict[ModelChecker, Type[ModelCheckerBackend]]:
        return self._backends.copy()


# Global registry instance
_registry = CheckerRegistry()
_registry.register(ModelChecker.TLC, TLCRunner)
_registry.register(ModelChecker.APALACHE, ApalacheRunner)


def get_checker(runtime: ModelatorRuntime) -> ModelCheckerBackend:
    """
    Get the backend configured in a runtime.

    Args:
        runtime: Runtime naming the model checker

    Returns:
        Backend instance bound to the runtime
    """
    model_checker = runtime.model_checker_runtime.model_checker
    logger.debug(f"Using {model_checker.value} backend")
    return _registry.get_backend(model_checker)(runtime)


def get_available_checkers() -> Dict[ModelChecker, Type[ModelCheckerBackend]]:
    return _registry.get_available_checkers()
