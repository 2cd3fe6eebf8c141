"""
Runtime utilities for model checker jar path resolution and validation.

This module provides functions to locate the TLC and Apalache jars inside the
tla_mbt directory and check them before a model checker runs. It does NOT handle
downloading/installation; the jars are expected to already be in place.
"""

import logging
from pathlib import Path
import subprocess
from typing import Iterable, List, Optional, Union

from ..config import ModelChecker
from ..errors import MissingFileError, MissingJavaError

logger = logging.getLogger(__name__)


TLA_TOOLS_JAR = "tla2tools.jar"
COMMUNITY_MODULES_JAR = "CommunityModules-deps.jar"
APALACHE_JAR = "apalache.jar"


def get_tla_tools_path(base_dir: Union[str, Path]) -> Path:
    """
    Get the path to tla2tools.jar.

    Args:
        base_dir: tla_mbt directory holding the jars

    Returns:
        Path to tla2tools.jar file
    """
    return Path(base_dir) / TLA_TOOLS_JAR


def get_community_modules_path(base_dir: Union[str, Path]) -> Path:
    """
    Get the path to CommunityModules-deps.jar.

    Args:
        base_dir: tla_mbt directory holding the jars

    Returns:
        Path to CommunityModules-deps.jar file
    """
    return Path(base_dir) / COMMUNITY_MODULES_JAR


def get_apalache_path(base_dir: Union[str, Path]) -> Path:
    """Get the path to the Apalache jar."""
    return Path(base_dir) / APALACHE_JAR


def check_java_available() -> bool:
    """
    Check if Java is available in the system.

    Returns:
        True if Java is available and can be executed, False otherwise
    """
    try:
        result = subprocess.run(
            ['java', '-version'],
            capture_output=True,
            text=True,
            timeout=5
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False


def get_java_version() -> Optional[str]:
    """
    Get the Java version string.

    Returns:
        Java version string if available, None otherwise
    """
    try:
        result = subprocess.run(
            ['java', '-version'],
            capture_output=True,
            text=True,
            timeout=5
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return None
    if result.returncode != 0:
        return None
    # Java prints its version to stderr
    version_output = result.stderr or result.stdout
    for line in version_output.split('\n'):
        if 'version' in line.lower():
            return line.strip()
    return None


def required_jars(model_checkers: Iterable[ModelChecker], base_dir: Union[str, Path]) -> List[Path]:
    """Jars the given model checkers are run from."""
    jars = []
    for model_checker in model_checkers:
        if model_checker == ModelChecker.TLC:
            jars.extend([get_tla_tools_path(base_dir), get_community_modules_path(base_dir)])
        else:
            jars.append(get_apalache_path(base_dir))
    return jars


def check_tools_setup(model_checkers: Iterable[ModelChecker], base_dir: Union[str, Path]) -> None:
    """
    Validate that Java and the jars of the given model checkers are in place.

    Args:
        model_checkers: Model checkers about to be run
        base_dir: tla_mbt directory holding the jars

    Raises:
        MissingJavaError: Java can not be executed
        MissingFileError: a required jar is missing
    """
    if not check_java_available():
        raise MissingJavaError()
    logger.debug(f"Using {get_java_version()}")

    for jar in required_jars(model_checkers, base_dir):
        if not jar.is_file():
            raise MissingFileError(jar)
