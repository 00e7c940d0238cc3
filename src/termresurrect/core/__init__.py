"""Core module - terminal-agnostic utilities"""

from .paths import extract_path_from_uri, path_to_uri
from .result import Error, ErrorKind, Result

__all__ = [
    "Error",
    "ErrorKind",
    "Result",
    "extract_path_from_uri",
    "path_to_uri",
]
