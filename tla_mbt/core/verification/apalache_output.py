"""
Apalache stdout inspection.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

COUNTEREXAMPLE_RE = re.compile(r"([^\s'\"]*counterexample\d*\.tla)")
ERROR_EXIT_MARKER = "EXITCODE: ERROR"


@dataclass
class ApalacheOutput:
    """Captured stdout and stderr lines of one Apalache invocation."""
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)

    def counterexample_filenames(self) -> List[str]:
        """Counterexample files reported in stdout, in order, without duplicates."""
        filenames = []
        for line in self.stdout:
            for match in COUNTEREXAMPLE_RE.finditer(line):
                name = match.group(1)
                if name not in filenames:
                    filenames.append(name)
        return filenames

    def non_counterexample_error(self) -> Optional[str]:
        """
        Error text when Apalache failed without producing a counterexample.

        Returns:
            The stdout text, or None if Apalache did not fail or failed by
            finding a counterexample
        """
        failed = any(ERROR_EXIT_MARKER in line for line in self.stdout)
        if failed and not self.counterexample_filenames():
            return "\n".join(self.stdout)
        return None
