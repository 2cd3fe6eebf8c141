"""
Utility functions for tla_mbt.
"""

from .setup_utils import (
    get_tla_tools_path,
    get_community_modules_path,
    get_apalache_path,
    check_java_available,
    get_java_version,
    required_jars,
    check_tools_setup
)
from .fs import absolute_path, check_file_existence, read_dir, read_text, write_text

__all__ = [
    "get_tla_tools_path",
    "get_community_modules_path",
    "get_apalache_path",
    "check_java_available",
    "get_java_version",
    "required_jars",
    "check_tools_setup",
    "absolute_path",
    "check_file_existence",
    "read_dir",
    "read_text",
    "write_text"
]
