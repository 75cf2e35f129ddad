"""
Utility functions - Pure functions with no dependencies.
These can be used across all layers.
"""
from .json_utils import parse_model_json, strip_code_fences, find_json_object

__all__ = [
    "parse_model_json",
    "strip_code_fences",
    "find_json_object"
]
