"""
Module Loader

Wraps one ModuleDescriptor and loads it lazily, at most once.

This class handles:
- Memoized loading (Unloaded -> Loaded | Failed, never back)
- Load-once locking across threads, with deadlock detection
- Package re-export of the ``index`` submodule
- Submodule lookup by path segments
- Test and subpackage discovery for packaging tools
"""

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .evaluator import Evaluator, Exports
from .module_info import ModuleDescriptor
from ..shared.errors import CircularImportError, LoadFailure, ModuleNotFound
from ..utils.base import Result
from ..utils.config import (
    MODULE_SEPARATOR,
    PACKAGE_INDEX_MODULE,
    RESERVED_TESTS_ID,
    TEST_DIR,
    TEST_FILE_PATTERN,
)

logger = logging.getLogger(__name__)


class LoadState(Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    FAILED = "failed"


class LoadLocks:
    """
    Lock bookkeeping shared by every loader of one registry.

    Each loader is owned by at most one thread while it loads. ``blocking_on``
    records which loader each waiting thread is blocked on, so a thread about
    to wait can follow owner -> blocked-on -> owner ... and refuse to wait
    when the chain leads back to itself.
    """

    def __init__(self):
        self.condition = threading.Condition(threading.Lock())
        self.blocking_on: Dict[int, 'ModuleLoader'] = {}

    def would_deadlock(self, loader: 'ModuleLoader', thread_id: int) -> bool:
        """Called with ``condition`` held"""
        seen = set()
        owner = loader._owner
        while owner is not None and owner not in seen:
            if owner == thread_id:
                return True
            seen.add(owner)
            waiting_for = self.blocking_on.get(owner)
            if waiting_for is None:
                return False
            owner = waiting_for._owner
        return False


class ModuleLoader:
    """
    Lazy loader for one module or package.

    Children loaders mirror the descriptor tree and are created eagerly;
    module bodies run on the first ``load()`` only.
    """

    def __init__(self, descriptor: ModuleDescriptor, evaluator: Evaluator, log=None,
                 locks: Optional[LoadLocks] = None):
        """
        Args:
            descriptor: The module this loader owns
            evaluator: Executes leaf module source
            log: Logging collaborator load failures are forwarded to
            locks: Lock bookkeeping shared with the other loaders of the registry
        """
        self.descriptor = descriptor
        self.evaluator = evaluator
        self.log = log
        self.locks = locks if locks is not None else LoadLocks()
        self.state = LoadState.UNLOADED
        self.exports: Exports = {}
        self.error: Optional[LoadFailure] = None
        self.submodules: Dict[str, 'ModuleLoader'] = {
            child_id: ModuleLoader(child, evaluator, log, self.locks)
            for child_id, child in descriptor.children.items()
        }
        self._owner: Optional[int] = None
        self._depth = 0
        self._loading = False

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def location(self) -> Path:
        return self.descriptor.location

    @property
    def is_package(self) -> bool:
        return self.descriptor.is_package

    @property
    def loaded(self) -> bool:
        return self.state == LoadState.LOADED

    @property
    def failed(self) -> bool:
        return self.state == LoadState.FAILED

    def _acquire(self) -> None:
        me = threading.get_ident()
        with self.locks.condition:
            while self._owner is not None and self._owner != me:
                if self.locks.would_deadlock(self, me):
                    raise CircularImportError(
                        f"Circular import detected: {self.id} is being loaded by another thread "
                        f"that is waiting on this one"
                    )
                self.locks.blocking_on[me] = self
                try:
                    self.locks.condition.wait()
                finally:
                    del self.locks.blocking_on[me]
            self._owner = me
            self._depth += 1

    def _release(self) -> None:
        with self.locks.condition:
            self._depth -= 1
            if self._depth == 0:
                self._owner = None
                self.locks.condition.notify_all()

    def load(self) -> Tuple[Exports, Optional[LoadFailure]]:
        """
        Load the module once and return ``(exports, error)``.

        Failures of the module body are logged and reported as empty exports
        plus the LoadFailure; they are never raised. Concurrent callers block
        until the first load finishes.

        Raises:
            CircularImportError: If this module is still loading on this thread,
                or waiting for it would deadlock with another loading thread
        """
        self._acquire()
        try:
            if self.state != LoadState.UNLOADED:
                return self.exports, self.error
            if self._loading:
                raise CircularImportError(f"Circular import detected: {self.id} is still loading")

            self._loading = True
            try:
                result = self._load_package() if self.is_package else self._load_leaf()
            finally:
                self._loading = False

            if result.is_err():
                self.exports = {}
                self.error = result.value
                self.state = LoadState.FAILED
                self._report(result.value)
            else:
                self.exports = result.value
                self.state = LoadState.LOADED
                logger.debug(f"Loaded module {self.id}: {len(self.exports)} exports")
            return self.exports, self.error
        finally:
            self._release()

    def _load_leaf(self) -> Result[Exports, LoadFailure]:
        return self.evaluator.evaluate(self.id, self.location)

    def _load_package(self) -> Result[Exports, LoadFailure]:
        index = self.submodules.get(PACKAGE_INDEX_MODULE)
        if index is None:
            return Result.err(LoadFailure(
                self.id,
                ModuleNotFound(f"Package {self.id} has no {PACKAGE_INDEX_MODULE} module"),
                location=self.location,
            ))
        exports, error = index.load()
        if error is not None:
            # Already reported by the index loader itself
            return Result.err(LoadFailure(self.id, error.cause, location=self.location))
        return Result.ok(exports)

    def _report(self, failure: LoadFailure) -> None:
        # The index failure was logged once already; the package just inherits it
        if self.is_package and PACKAGE_INDEX_MODULE in self.submodules:
            logger.debug(f"Package {self.id} failed because its index module failed")
            return
        template = "Could not fully load %s\n%s"
        if self.log is not None:
            self.log.log(logging.ERROR, template, self.id, failure.cause)
        else:
            logger.error(template, self.id, failure.cause)

    def get_submodule(self, segments: Sequence[str], identifier: Optional[str] = None) -> 'ModuleLoader':
        """
        Walk the children one segment at a time.

        Args:
            segments: Path below this module (e.g., ['sub', 'leaf'])
            identifier: Full identifier as originally requested, used in errors

        Raises:
            ModuleNotFound: If a segment does not exist
        """
        if identifier is None:
            identifier = MODULE_SEPARATOR.join([self.id, *segments])
        current = self
        for segment in segments:
            child = current.submodules.get(segment)
            if child is None:
                raise ModuleNotFound(f"No module named {identifier}", identifier=identifier)
            current = child
        return current

    def get_subpackages(self) -> List['ModuleLoader']:
        """Children that are packages themselves, excluding the reserved ``tests`` id"""
        return [
            child for child in self.submodules.values()
            if child.is_package and child.id != RESERVED_TESTS_ID
        ]

    def has_subpackages(self) -> bool:
        return bool(self.get_subpackages())

    def get_tests(self) -> Iterator[Path]:
        """Yield ``*.specs`` files in the package's ``test`` folder (nothing for leaves)"""
        if not self.is_package:
            return
        test_dir = self.location / TEST_DIR
        if not test_dir.is_dir():
            return
        yield from sorted(p for p in test_dir.glob(TEST_FILE_PATTERN) if p.is_file())

    def __repr__(self) -> str:
        return f"ModuleLoader(id={self.id!r}, state={self.state.value}, package={self.is_package})"
