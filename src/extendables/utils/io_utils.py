"""
Source file access for the evaluator and the settings loader.

Module sources and settings files are always read as UTF-8 text.
"""

from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str]) -> str:
    """Return the text of a module source or settings file."""
    return Path(path).read_text(encoding=DEFAULT_FILE_ENCODING)
