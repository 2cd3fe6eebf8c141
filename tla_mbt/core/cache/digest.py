"""
Streaming SHA-256 digest over files and text.
"""

import hashlib
import logging
from pathlib import Path
from typing import Iterable, Union

from ...errors import ModelatorIOError

logger = logging.getLogger(__name__)

BUFFER_SIZE = 8 * 1024


class DigestHandle:
    """Running SHA-256 digest."""

    def __init__(self):
        self._hasher = hashlib.sha256()

    def update_file(self, path: Union[str, Path]) -> "DigestHandle":
        try:
            with open(path, 'rb') as f:
                while True:
                    chunk = f.read(BUFFER_SIZE)
                    if not chunk:
                        break
                    self._hasher.update(chunk)
        except OSError as e:
            raise ModelatorIOError(str(e)) from e
        return self

    def update_text(self, text: str) -> "DigestHandle":
        self._hasher.update(text.encode('utf-8'))
        return self

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()


def digest_files(paths: Iterable[Union[str, Path]]) -> DigestHandle:
    """
    Feed every file, in order, through one running digest.

    Args:
        paths: Files to hash; order matters

    Returns:
        DigestHandle that can be fed more text before finalizing
    """
    handle = DigestHandle()
    for path in paths:
        logger.debug(f"Hashing {path}")
        handle.update_file(path)
    return handle
