"""
TLA+ file artifacts.

A TlaFileSuite groups the primary module, its model checker configuration and
the modules it transitively EXTENDS, so the whole suite can be copied into a
scratch directory before a checker runs on it.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Set, Union

from ...errors import MissingFileError, ModelatorIOError
from ...utils.fs import check_file_existence, read_text

logger = logging.getLogger(__name__)

# modules shipped with TLC and the community modules jar
STANDARD_MODULES = frozenset([
    "Bags",
    "FiniteSets",
    "Integers",
    "Json",
    "Naturals",
    "Randomization",
    "Reals",
    "RealTime",
    "Sequences",
    "TLC",
    "TLCExt",
    "Toolbox",
])


def parse_extends(content: str) -> List[str]:
    """
    Module names listed on `EXTENDS` lines.

    Args:
        content: Module source text

    Returns:
        Extended module names in declaration order
    """
    names = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped.startswith("EXTENDS"):
            continue
        for name in stripped[len("EXTENDS"):].split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
    return names


class TlaFile:
    """A `.tla` module on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = check_file_existence(path)
        if self.path.suffix != ".tla":
            raise MissingFileError(self.path)

    @property
    def module_name(self) -> str:
        return self.path.stem

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.parent

    def content(self) -> str:
        return read_text(self.path)

    def extends(self) -> List[str]:
        return parse_extends(self.content())

    def __eq__(self, other):
        return isinstance(other, TlaFile) and self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"TlaFile({str(self.path)!r})"


class TlaConfigFile:
    """A `.cfg` model checker configuration on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = check_file_existence(path)

    @property
    def file_name(self) -> str:
        return self.path.name

    def content(self) -> str:
        return read_text(self.path)

    def __eq__(self, other):
        return isinstance(other, TlaConfigFile) and self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"TlaConfigFile({str(self.path)!r})"


def gather_dependencies(tla_file: TlaFile) -> List[TlaFile]:
    """
    Transitive closure of the non-standard modules `tla_file` extends.

    Dependencies are looked up next to the module that extends them. A
    missing dependency raises MissingFileError.
    """
    seen: Set[str] = {tla_file.module_name}
    dependencies: List[TlaFile] = []
    pending = [tla_file]
    while pending:
        current = pending.pop()
        for name in current.extends():
            if name in STANDARD_MODULES or name in seen:
                continue
            seen.add(name)
            dependency = TlaFile(current.directory / f"{name}.tla")
            dependencies.append(dependency)
            pending.append(dependency)
    return dependencies


class TlaFileSuite:
    """Primary module, configuration and the modules it depends on."""

    def __init__(self, tla_file: TlaFile, tla_config_file: TlaConfigFile,
                 dependencies: Optional[List[TlaFile]] = None):
        self.tla_file = tla_file
        self.tla_config_file = tla_config_file
        if dependencies is None:
            dependencies = gather_dependencies(tla_file)
        self.dependencies = dependencies

    @classmethod
    def from_paths(cls, tla_path: Union[str, Path],
                   cfg_path: Union[str, Path]) -> "TlaFileSuite":
        return cls(TlaFile(tla_path), TlaConfigFile(cfg_path))

    def write_to_dir(self, directory: Union[str, Path]) -> "TlaFileSuite":
        """
        Copy every file of the suite into `directory`.

        Returns:
            A suite pointing at the copies
        """
        directory = Path(directory)
        logger.debug(f"Copying {self.tla_file.module_name} suite to {directory}")
        try:
            directory.mkdir(parents=True, exist_ok=True)
            copied = []
            for tla_file in [self.tla_file] + self.dependencies:
                target = directory / tla_file.file_name
                if tla_file.path != target.resolve():
                    shutil.copyfile(tla_file.path, target)
                copied.append(TlaFile(target))
            cfg_target = directory / self.tla_config_file.file_name
            if self.tla_config_file.path != cfg_target.resolve():
                shutil.copyfile(self.tla_config_file.path, cfg_target)
        except OSError as e:
            raise ModelatorIOError(str(e)) from e
        return TlaFileSuite(copied[0], TlaConfigFile(cfg_target), copied[1:])

    def __repr__(self):
        return (f"TlaFileSuite({self.tla_file!r}, {self.tla_config_file!r}, "
                f"dependencies={self.dependencies!r})")
