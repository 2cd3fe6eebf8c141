"""
Processing of TLA+ modules and printed values.
"""

from .tla_tests import extract_test_names, generate_tests
from .tla_values import state_to_json, tla_value_to_json, try_state_to_json

__all__ = [
    "extract_test_names",
    "generate_tests",
    "state_to_json",
    "tla_value_to_json",
    "try_state_to_json"
]
