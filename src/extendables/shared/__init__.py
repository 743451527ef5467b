"""
Shared components: error types used across the module system.
"""

from .errors import (
    ExtendablesError,
    ModuleNotFound,
    LoadFailure,
    CircularImportError,
    RegistryError,
    SettingsError,
)
