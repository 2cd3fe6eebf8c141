"""
On-disk caching of model checker results.
"""

from .cache import Cache, NextStatesCache, TraceCache, cache_key
from .digest import DigestHandle, digest_files

__all__ = [
    "Cache",
    "NextStatesCache",
    "TraceCache",
    "cache_key",
    "DigestHandle",
    "digest_files"
]
