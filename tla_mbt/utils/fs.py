"""
Filesystem helpers shared by the cache and the artifact types.
"""

import logging
import os
from pathlib import Path
from typing import Set, Union

from ..errors import InvalidUnicodeError, MissingFileError, ModelatorIOError

logger = logging.getLogger(__name__)


def read_dir(path: Union[str, Path]) -> Set[str]:
    """
    List the entry names of a directory.

    Args:
        path: Directory to list

    Returns:
        Set of entry names (not paths)
    """
    logger.debug(f"read_dir {path}")
    try:
        names = os.listdir(path)
    except OSError as e:
        raise ModelatorIOError(str(e)) from e

    file_names = set()
    for name in names:
        try:
            name.encode('utf-8')
        except UnicodeEncodeError as e:
            raise InvalidUnicodeError(name) from e
        file_names.add(name)
    return file_names


def absolute_path(path: Union[str, Path]) -> str:
    """Canonical absolute path of an existing file, as a string."""
    path = Path(path)
    if not path.exists():
        raise MissingFileError(path)
    return str(path.resolve())


def check_file_existence(path: Union[str, Path]) -> Path:
    """Return the canonical path of `path`, failing if it is not a file."""
    path = Path(path)
    if not path.is_file():
        raise MissingFileError(path)
    return path.resolve()


def read_text(path: Union[str, Path]) -> str:
    """Read a UTF-8 text file, mapping failures to tla_mbt errors."""
    path = Path(path)
    if not path.is_file():
        raise MissingFileError(path)
    try:
        return path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise InvalidUnicodeError(str(path)) from e
    except OSError as e:
        raise ModelatorIOError(str(e)) from e


def write_text(path: Union[str, Path], content: str) -> None:
    """Write a UTF-8 text file, mapping failures to tla_mbt errors."""
    try:
        Path(path).write_text(content, encoding='utf-8')
    except OSError as e:
        raise ModelatorIOError(str(e)) from e
