"""
Extendables utilities package
"""

from .io_utils import read_source_file
from .log_buffer import BufferedLog, LogRecordEntry

__all__ = ["read_source_file", "BufferedLog", "LogRecordEntry"]
