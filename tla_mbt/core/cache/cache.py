"""
Content-addressed, write-once on-disk cache.

Entries live at `<root>/cache/<table>/<key>` as JSON blobs. A key, once
written, is never overwritten and never deleted; the in-memory key index is
rebuilt from the directory listing whenever a table is opened. Concurrent
writers of the same key are not coordinated here.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from ..artifacts import TlaConfigFile, TlaFile, TlaTrace
from ...errors import DeserializationError, ModelatorIOError
from ...utils.fs import absolute_path, read_dir, read_text, write_text
from .digest import digest_files

logger = logging.getLogger(__name__)

CACHE_DIR = "cache"


def cache_key(tla_file: TlaFile, tla_config_file: TlaConfigFile) -> str:
    """
    Compute the cache key of a (module, configuration) pair.

    Every `.tla` file next to the module and the configuration are hashed in
    sorted absolute-path order; the module's own path is hashed last so two
    modules in the same directory never share a key.

    Args:
        tla_file: Primary module
        tla_config_file: Its configuration

    Returns:
        Hex digest usable as a cache key
    """
    directory = tla_file.path.parent
    paths = [
        absolute_path(directory / name)
        for name in read_dir(directory)
        if name.endswith(".tla")
    ]
    paths.append(absolute_path(tla_config_file.path))
    paths.sort()

    handle = digest_files(paths)
    handle.update_text(absolute_path(tla_file.path))
    key = handle.hexdigest()
    logger.debug(f"Cache key for {tla_file.file_name}: {key}")
    return key


class Cache:
    """A named write-once table of JSON values."""

    def __init__(self, name: str, root_dir: Union[str, Path]):
        self.name = name
        self.directory = Path(root_dir) / CACHE_DIR / name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ModelatorIOError(str(e)) from e
        self._keys: Set[str] = read_dir(self.directory)
        logger.debug(f"Opened cache table {name} with {len(self._keys)} entries")

    def get(self, key: str) -> Optional[Any]:
        if key not in self._keys:
            return None
        blob = read_text(self.directory / key)
        try:
            return json.loads(blob)
        except json.JSONDecodeError as e:
            raise DeserializationError(f"{self.name}/{key}: {e}") from e

    def put(self, key: str, value: Any) -> None:
        assert key not in self._keys, f"cache key {key} already present in {self.name}"
        write_text(self.directory / key, json.dumps(value))
        self._keys.add(key)

    def keys(self) -> Set[str]:
        return set(self._keys)

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class TraceCache:
    """Traces generated per test, keyed by `cache_key`."""

    TABLE = "tla_trace"

    def __init__(self, root_dir: Union[str, Path]):
        self.cache = Cache(self.TABLE, root_dir)

    def get(self, key: str) -> Optional[List[TlaTrace]]:
        value = self.cache.get(key)
        if value is None:
            return None
        try:
            return [TlaTrace.from_dict(trace) for trace in value]
        except (KeyError, TypeError) as e:
            raise DeserializationError(f"{self.TABLE}/{key}: {e}") from e

    def put(self, key: str, traces: List[TlaTrace]) -> None:
        self.cache.put(key, [trace.to_dict() for trace in traces])


class NextStatesCache:
    """
    Versioned exploration session snapshots.

    Each persist writes `<session key>.<version>` with a strictly increasing
    version; loading returns the highest version.
    """

    TABLE = "next_states"

    def __init__(self, root_dir: Union[str, Path]):
        self.cache = Cache(self.TABLE, root_dir)

    def _versions(self, key: str) -> List[int]:
        pattern = re.compile(re.escape(key) + r"\.(\d+)$")
        versions = []
        for entry in self.cache.keys():
            match = pattern.match(entry)
            if match:
                versions.append(int(match.group(1)))
        return sorted(versions)

    def latest_version(self, key: str) -> Optional[int]:
        versions = self._versions(key)
        return versions[-1] if versions else None

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        version = self.latest_version(key)
        if version is None:
            return None
        logger.debug(f"Loading session {key} version {version}")
        return self.cache.get(f"{key}.{version}")

    def persist(self, key: str, snapshot: Dict[str, Any]) -> int:
        """Write a new snapshot version and return it."""
        latest = self.latest_version(key)
        version = 0 if latest is None else latest + 1
        self.cache.put(f"{key}.{version}", snapshot)
        return version
