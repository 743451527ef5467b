"""
Error Types

Exceptions raised by the module system. ``ModuleNotFound`` reaches the
caller of ``require``; ``LoadFailure`` is recovered inside the loader and
only ever travels as a value.
"""

from pathlib import Path
from typing import Any, Dict, Optional


class ExtendablesError(Exception):
    """Base exception for all Extendables errors"""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ModuleNotFound(ExtendablesError, LookupError):
    """Raised when a module identifier (or one of its segments) cannot be resolved"""
    def __init__(self, message: str, identifier: Optional[str] = None):
        super().__init__(message)
        self.identifier = identifier


class LoadFailure(ExtendablesError):
    """
    A module body could not be fully executed.

    Carries the module id, the module location, the underlying exception and
    whatever the module had exported before it failed.
    """
    def __init__(self,
                 module_id: str,
                 cause: BaseException,
                 location: Optional[Path] = None,
                 partial_exports: Optional[Dict[str, Any]] = None):
        super().__init__(f"Could not fully load {module_id}\n{type(cause).__name__}: {cause}")
        self.module_id = module_id
        self.cause = cause
        self.location = location
        self.partial_exports = partial_exports if partial_exports is not None else {}


class CircularImportError(ExtendablesError):
    """Raised when a module is required again while its own body is still loading"""
    pass


class RegistryError(ExtendablesError):
    """Raised for misuse of the registry at startup (double population, bad search path)"""
    pass


class SettingsError(ExtendablesError):
    """Raised when a settings file cannot be parsed"""
    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
