"""Module system: path resolution, package scanning, evaluation, lazy loading."""

from .path_resolver import PathResolver, ModuleEntry
from .module_info import ModuleDescriptor
from .package_scanner import PackageScanner
from .evaluator import Evaluator, ModuleContext
from .module_loader import ModuleLoader, LoadState, LoadLocks
from .registry import ModuleRegistry

__all__ = [
    'PathResolver',
    'ModuleEntry',
    'ModuleDescriptor',
    'PackageScanner',
    'Evaluator',
    'ModuleContext',
    'ModuleLoader',
    'LoadState',
    'LoadLocks',
    'ModuleRegistry',
]
