"""
Package Scanner

Builds the descriptor tree of a package from the filesystem. Runs once per
package at startup; nothing is executed here.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from .module_info import ModuleDescriptor
from .path_resolver import PathResolver, ModuleEntry

logger = logging.getLogger(__name__)


class PackageScanner:
    """
    Walks package directories and classifies their entries.

    A top-level package is scanned inside its ``lib`` folder so that package
    metadata (README, tests, settings) can sit next to the code without being
    picked up as submodules. Folders found further down are scanned in place.
    """

    def __init__(self, path_resolver: Optional[PathResolver] = None, log=None):
        """
        Args:
            path_resolver: Filesystem capability (a fresh PathResolver if None)
            log: Logging collaborator for duplicate-id warnings (module logger if None)
        """
        self.path_resolver = path_resolver or PathResolver()
        self.log = log

    def describe(self, entry: ModuleEntry, use_lib: bool = False) -> ModuleDescriptor:
        """Build the descriptor for one entry, scanning children of folders"""
        if not entry.is_dir:
            return ModuleDescriptor(id=entry.id, location=entry.path)
        code_root = self.path_resolver.code_root(entry.path, use_lib)
        return ModuleDescriptor(
            id=entry.id,
            location=entry.path,
            is_package=True,
            children=self.scan(code_root),
            code_root=code_root,
        )

    def scan(self, directory: Path) -> Dict[str, ModuleDescriptor]:
        """
        Scan one folder into child descriptors.

        Returns:
            Dict mapping child id to descriptor. On an id collision the later
            entry (by name) replaces the earlier one and a warning is logged.
        """
        if not self.path_resolver.exists(directory):
            logger.debug(f"No code folder at {directory}; package has no submodules")
            return {}

        children: Dict[str, ModuleDescriptor] = {}
        for entry in self.path_resolver.list_entries(directory):
            if entry.id in children:
                self._warn_duplicate(entry.id, children[entry.id].location, entry.path)
            children[entry.id] = self.describe(entry)
        return children

    def _warn_duplicate(self, module_id: str, previous: Path, replacement: Path) -> None:
        template = "Duplicate module id %r: %s replaces %s"
        if self.log is not None:
            self.log.log(logging.WARNING, template, module_id, replacement, previous)
        else:
            logger.warning(template, module_id, replacement, previous)
