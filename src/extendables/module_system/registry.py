"""
Module Registry

Process-scoped map from top-level module id to its ModuleLoader, plus the
``require``/``extract`` resolver. A registry is populated once from the
configured search path and is read-only afterwards; tests build their own
isolated registries.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, MutableMapping, Optional, Tuple, Union

from .evaluator import Evaluator, Exports
from .module_loader import LoadLocks, ModuleLoader
from .package_scanner import PackageScanner
from .path_resolver import PathResolver
from ..shared.errors import ModuleNotFound, RegistryError
from ..utils.config import LOGGER_NAME, MODULE_SEPARATOR
from ..utils.log_buffer import BufferedLog

logger = logging.getLogger(__name__)

SearchPathEntry = Union[str, Path]


class ModuleRegistry:
    """
    Top-level module table and resolver.

    Example:
        registry = ModuleRegistry(PathResolver(base=root))
        registry.populate(["core-packages", "site-packages"])
        http = registry.require("http/client")
    """

    def __init__(
        self,
        path_resolver: Optional[PathResolver] = None,
        log: Optional[BufferedLog] = None,
        shared_scope: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            path_resolver: Filesystem capability; relative search-path entries join onto its base
            log: Logging collaborator. If None, a BufferedLog already attached to the
                ``extendables`` logger, so load failures are emitted right away.
                A caller passing an unattached BufferedLog must ``attach`` it later.
            shared_scope: Global namespace visible to all module code
        """
        self.path_resolver = path_resolver or PathResolver()
        self.log = log if log is not None else BufferedLog(logging.getLogger(LOGGER_NAME))
        self.shared_scope: Dict[str, Any] = shared_scope if shared_scope is not None else {}
        self.scanner = PackageScanner(self.path_resolver, self.log)
        self.evaluator = Evaluator(self.shared_scope, require=self.require, extract=self.extract)
        self.locks = LoadLocks()
        self._entries: Dict[str, ModuleLoader] = {}
        self._populated = False

    @property
    def entries(self) -> Mapping[str, ModuleLoader]:
        """Read-only view of the top-level loaders"""
        return MappingProxyType(self._entries)

    @property
    def populated(self) -> bool:
        return self._populated

    def populate(self, search_path: Iterable[SearchPathEntry]) -> 'ModuleRegistry':
        """
        Discover top-level packages in every search-path folder.

        Scans eagerly (the whole descriptor tree is known afterwards) but
        executes nothing. Later folders win id collisions.

        Raises:
            RegistryError: If already populated or a search-path entry is not a folder
        """
        if self._populated:
            raise RegistryError("Module registry is already populated")

        entries: Dict[str, ModuleLoader] = {}
        for raw in search_path:
            folder = self.path_resolver.at_base(raw)
            if not self.path_resolver.exists(folder) or not folder.is_dir():
                raise RegistryError(f"Package directory {folder} does not exist")
            folder = self.path_resolver.resolve_alias(folder)
            for entry in self.path_resolver.list_entries(folder):
                descriptor = self.scanner.describe(entry, use_lib=True)
                if descriptor.id in entries:
                    self.log.log(logging.WARNING, "Duplicate package id %r: %s replaces %s",
                                 descriptor.id, descriptor.location, entries[descriptor.id].location)
                entries[descriptor.id] = ModuleLoader(descriptor, self.evaluator, self.log, self.locks)
                logger.debug(f"Registered package {descriptor.id} from {descriptor.location}")

        self._entries = entries
        self._populated = True
        return self

    def loader_for(self, identifier: str) -> ModuleLoader:
        """
        Resolve an identifier to its loader without loading it.

        Raises:
            ModuleNotFound: If the package or any submodule segment is missing
        """
        if not identifier:
            raise ModuleNotFound("Empty module identifier", identifier=identifier)
        terms = identifier.split(MODULE_SEPARATOR)
        if any(not term for term in terms):
            raise ModuleNotFound(f"Malformed module identifier {identifier!r}", identifier=identifier)

        package, rest = terms[0], terms[1:]
        loader = self._entries.get(package)
        if loader is None:
            raise ModuleNotFound(f"No package named {identifier}", identifier=identifier)
        if rest:
            return loader.get_submodule(rest, identifier)
        return loader

    def require(self, identifier: str) -> Exports:
        """
        Return the exports of a module, loading it on first use.

        A module whose body failed resolves to empty exports; the failure
        has been logged.

        Raises:
            ModuleNotFound: If the identifier cannot be resolved
        """
        exports, _ = self.loader_for(identifier).load()
        return exports

    def extract(self, identifier: str, namespace: Optional[MutableMapping[str, Any]] = None) -> MutableMapping[str, Any]:
        """
        Copy every export of a module into ``namespace``.

        Without an explicit namespace the names land in the registry's shared
        scope, where every module loaded afterwards sees them. That pollutes
        the global namespace and can silently shadow names; prefer passing an
        explicit target.
        """
        target = namespace if namespace is not None else self.shared_scope
        target.update(self.require(identifier))
        return target

    def iter_tests(self) -> Iterator[Tuple[str, Path]]:
        """Yield (package id, spec file) for every top-level package"""
        for package_id, loader in self._entries.items():
            for spec in loader.get_tests():
                yield package_id, spec

    def __contains__(self, package_id: str) -> bool:
        return package_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ModuleRegistry(packages={sorted(self._entries)})"
