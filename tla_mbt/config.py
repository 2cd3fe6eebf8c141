"""
Configuration management for model checker runtimes.

This module handles loading and managing the runtime settings (which model
checker to use, how many workers, where to keep jars and caches), allowing
users to define them in a YAML config file:

    runtime:
      dir: ~/.tla_mbt
      model_checker: tlc
      workers: auto
      log: mc.log
      traces_per_test: 1
"""

import yaml
import os
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, Union

from .errors import UnrecognizedCheckerError

logger = logging.getLogger(__name__)

DEFAULT_TRACES_PER_TEST = 1
DIR_ENV_VAR = "TLA_MBT_DIR"


class ModelChecker(Enum):
    """Supported model checker backends."""
    TLC = "tlc"
    APALACHE = "apalache"

    @classmethod
    def from_str(cls, name: str) -> "ModelChecker":
        """Parse a checker name, case-insensitively."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnrecognizedCheckerError(name) from None


@dataclass(frozen=True)
class Workers:
    """Number of model checker worker threads; `None` count means auto."""
    count: Optional[int] = None

    @classmethod
    def from_str(cls, value: Union[str, int]) -> "Workers":
        if isinstance(value, int):
            count = value
        elif value.strip().lower() == "auto":
            return cls()
        else:
            try:
                count = int(value)
            except ValueError:
                raise ValueError(f"unsupported value {value!r}") from None
        if count < 1:
            raise ValueError(f"unsupported value {value!r}")
        return cls(count)

    @property
    def is_auto(self) -> bool:
        return self.count is None

    def __str__(self) -> str:
        return "auto" if self.count is None else str(self.count)


@dataclass(frozen=True)
class ModelCheckerRuntime:
    """Options to select the model checker and configure it."""
    model_checker: ModelChecker = ModelChecker.TLC
    workers: Workers = field(default_factory=Workers)
    # model checker log file, for debugging purposes
    log: Path = Path("mc.log")
    # maximum number of traces to try to generate for a single test
    traces_per_test: int = DEFAULT_TRACES_PER_TEST


def default_dir() -> Path:
    """The tla_mbt directory: $TLA_MBT_DIR, or ~/.tla_mbt."""
    env_dir = os.environ.get(DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".tla_mbt"


@dataclass(frozen=True)
class ModelatorRuntime:
    """Runtime settings shared by every tla_mbt operation."""
    model_checker_runtime: ModelCheckerRuntime = field(default_factory=ModelCheckerRuntime)
    # holds the jars and the cache tables
    dir: Path = field(default_factory=default_dir)

    def with_model_checker(self, model_checker: ModelChecker) -> "ModelatorRuntime":
        mc_runtime = replace(self.model_checker_runtime, model_checker=model_checker)
        return replace(self, model_checker_runtime=mc_runtime)

    def with_workers(self, workers: Workers) -> "ModelatorRuntime":
        mc_runtime = replace(self.model_checker_runtime, workers=workers)
        return replace(self, model_checker_runtime=mc_runtime)

    def with_log(self, log: Union[str, Path]) -> "ModelatorRuntime":
        mc_runtime = replace(self.model_checker_runtime, log=Path(log))
        return replace(self, model_checker_runtime=mc_runtime)

    def with_dir(self, dir: Union[str, Path]) -> "ModelatorRuntime":
        return replace(self, dir=Path(dir))

    def setup(self) -> None:
        """Create the tla_mbt directory if it doesn't exist yet."""
        self.dir.mkdir(parents=True, exist_ok=True)


def runtime_from_dict(data: Dict[str, Any]) -> ModelatorRuntime:
    """
    Build a runtime from the `runtime` section of a config file.

    Args:
        data: Mapping with optional keys dir, model_checker, workers, log
            and traces_per_test

    Returns:
        ModelatorRuntime with defaults for missing keys
    """
    mc_kwargs: Dict[str, Any] = {}
    if 'model_checker' in data:
        mc_kwargs['model_checker'] = ModelChecker.from_str(str(data['model_checker']))
    if 'workers' in data:
        mc_kwargs['workers'] = Workers.from_str(data['workers'])
    if 'log' in data:
        mc_kwargs['log'] = Path(data['log'])
    if 'traces_per_test' in data:
        traces_per_test = int(data['traces_per_test'])
        if traces_per_test < 1:
            raise ValueError("traces_per_test must be a positive integer")
        mc_kwargs['traces_per_test'] = traces_per_test

    runtime_kwargs: Dict[str, Any] = {
        'model_checker_runtime': ModelCheckerRuntime(**mc_kwargs)
    }
    if 'dir' in data:
        runtime_kwargs['dir'] = Path(str(data['dir'])).expanduser()
    return ModelatorRuntime(**runtime_kwargs)


class ConfigManager:
    """Manages runtime configuration from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to the configuration file; None uses defaults only
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if self.config_path is None:
            return {}

        config_file = Path(self.config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Invalid config file: expected a mapping in {self.config_path}")

        return config

    def get_runtime(self) -> ModelatorRuntime:
        """
        Get the configured runtime.

        Returns:
            ModelatorRuntime built from the `runtime` section
        """
        section = self.config.get('runtime') or {}
        if not isinstance(section, dict):
            raise ValueError("Invalid config file: 'runtime' must be a mapping")
        runtime = runtime_from_dict(section)
        logger.debug(f"Loaded runtime: {runtime}")
        return runtime

