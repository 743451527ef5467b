"""
Module Path Resolution

Filesystem capability used by the scanner and the registry: list directory
entries, test existence, resolve aliases and join relative names onto
folders.

This class is stateless and can be shared/reused.
"""

import logging
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from ..utils.config import (
    IGNORED_ENTRY_NAMES,
    MODULE_FILE_EXTENSION,
    PACKAGE_CODE_DIR,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ModuleEntry(NamedTuple):
    """A valid directory entry: derived id, alias-resolved path, kind"""
    id: str
    path: Path
    is_dir: bool


class PathResolver:
    """
    Pure path resolution for Extendables modules.

    - "core-packages" relative to base → base/core-packages
    - pkg → pkg/lib (code root of a top-level package)
    - symlinked folder → its real target

    This class is stateless and can be shared/reused.
    """

    def __init__(self, base: Optional[PathLike] = None):
        """
        Args:
            base: Folder that relative search-path entries are joined onto (cwd if None)
        """
        self.base = Path(base) if base is not None else Path.cwd()

    def join(self, folder: PathLike, *parts: str) -> Path:
        """Join relative parts onto a folder"""
        path = Path(folder)
        for part in parts:
            path = path / part
        return path

    def at_base(self, entry: PathLike) -> Path:
        """
        Resolve a search-path entry.

        Strings are relative to the base folder; Path objects are taken as-is.
        """
        if isinstance(entry, Path):
            return entry
        return self.join(self.base, entry)

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def resolve_alias(self, path: PathLike) -> Path:
        """Resolve a symlink to its real target (no-op for regular entries)"""
        path = Path(path)
        if path.is_symlink():
            target = path.resolve()
            logger.debug(f"PathResolver: Resolved alias {path} -> {target}")
            return target
        return path

    def classify(self, entry: PathLike) -> Optional[ModuleEntry]:
        """
        Classify one directory entry.

        The id comes from the entry's own name; the kind comes from the
        alias-resolved target, so a symlink to a folder is a package.
        Returns None for entries that are neither folders nor source files.
        """
        entry = Path(entry)
        if entry.name.startswith(".") or entry.name in IGNORED_ENTRY_NAMES:
            return None
        target = self.resolve_alias(entry)
        if target.is_dir():
            return ModuleEntry(self.module_id(entry), target, True)
        if target.is_file() and entry.suffix == MODULE_FILE_EXTENSION:
            return ModuleEntry(self.module_id(entry), target, False)
        return None

    def list_entries(self, folder: PathLike) -> List[ModuleEntry]:
        """
        List valid module entries of a folder.

        Entries are sorted by name so scan order (and therefore which entry
        wins an id collision) does not depend on the filesystem.

        Raises:
            NotADirectoryError: If folder is not a directory
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(f"Not a directory: {folder}")
        entries = []
        for path in sorted(folder.iterdir(), key=lambda p: p.name):
            entry = self.classify(path)
            if entry is not None:
                entries.append(entry)
        return entries

    def code_root(self, package_dir: PathLike, use_lib: bool) -> Path:
        """Folder holding a package's submodules"""
        if use_lib:
            return self.join(package_dir, PACKAGE_CODE_DIR)
        return Path(package_dir)

    @staticmethod
    def module_id(path: PathLike) -> str:
        """Derive a module id: file or directory name up to the first dot"""
        return Path(path).name.split(".")[0]
