"""
Bootstrap

Startup path: settings → search path → registry → logger.

The logger is configured last, from the settings, so everything reported
before that point goes through a BufferedLog and is replayed once the
logger exists.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from .module_system import ModuleRegistry, PathResolver
from .shared.errors import SettingsError
from .utils.config import LOGGER_NAME
from .utils.log_buffer import BufferedLog
from .utils.settings import Settings, load_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logger(settings: Settings, root: Path) -> logging.Logger:
    """Set the level of the ``extendables`` logger and add the optional log file handler."""
    logger = logging.getLogger(LOGGER_NAME)
    try:
        logger.setLevel(settings.log_level)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"invalid log_level {settings.log_level!r}", settings.source) from e

    if settings.log_file:
        log_path = Path(settings.log_file)
        if not log_path.is_absolute():
            log_path = root / log_path
        already = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path.resolve()
            for h in logger.handlers
        )
        if not already:
            handler = logging.FileHandler(log_path, encoding="utf-8")
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)
    return logger


def boot(
    root: Union[str, Path],
    settings_file: Optional[Union[str, Path]] = None,
    package_directories: Optional[Iterable[Union[str, Path]]] = None,
    shared_scope: Optional[Dict[str, Any]] = None,
    log: Optional[BufferedLog] = None,
) -> ModuleRegistry:
    """
    Start the module system for the installation at ``root``.

    Args:
        root: Installation root; relative package directories join onto it
        settings_file: Explicit settings file (discovered if None)
        package_directories: Override the search path from the settings
        shared_scope: Global namespace visible to every module
        log: Startup log (a fresh BufferedLog if None)

    Returns:
        Populated ModuleRegistry; no module body has run yet
    """
    root = Path(root)
    log = log if log is not None else BufferedLog()
    settings = load_settings(root, Path(settings_file) if settings_file is not None else None, log)

    search_path = list(package_directories) if package_directories is not None else settings.package_directories
    registry = ModuleRegistry(PathResolver(base=root), log=log, shared_scope=shared_scope)
    registry.populate(search_path)
    log.debug("Registered %d packages: %s", len(registry), ", ".join(sorted(registry)))

    log.attach(configure_logger(settings, root))
    return registry
