"""
Extendables: a CommonJS-style module system for packages of Python source.

    registry = boot("/path/to/extendables")
    ui = registry.require("ui/widgets")
"""

from .bootstrap import boot
from .module_system import ModuleRegistry, ModuleLoader, LoadState, PathResolver
from .shared.errors import ExtendablesError, ModuleNotFound, LoadFailure
from .utils.log_buffer import BufferedLog

__all__ = [
    "boot",
    "ModuleRegistry",
    "ModuleLoader",
    "LoadState",
    "PathResolver",
    "ExtendablesError",
    "ModuleNotFound",
    "LoadFailure",
    "BufferedLog",
]
