"""
Module Evaluator

Executes one module's source in a fresh namespace and hands back what the
code put into ``exports``. A broken module must never take its siblings
down with it, so every exception raised while reading, compiling or running
the source is turned into a ``LoadFailure`` value.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..shared.errors import LoadFailure
from ..utils.base import Result
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)

Exports = Dict[str, Any]


@dataclass(frozen=True)
class ModuleContext:
    """Identity metadata visible to executing code as ``module``"""
    id: str
    location: Path


class Evaluator:
    """
    Runs module source with a scope of:

    - exports: a fresh, empty dict the module populates
    - module: ModuleContext(id, location)
    - require / extract: bound to the owning registry (when given)
    - every name of the shared scope (the registry's global namespace)
    """

    def __init__(
        self,
        shared_scope: Optional[Dict[str, Any]] = None,
        require: Optional[Callable[[str], Exports]] = None,
        extract: Optional[Callable[..., Any]] = None,
    ):
        self.shared_scope = shared_scope if shared_scope is not None else {}
        self.require = require
        self.extract = extract

    def _build_scope(self, context: ModuleContext) -> Dict[str, Any]:
        scope: Dict[str, Any] = dict(self.shared_scope)
        scope.update({
            "__name__": f"extendables.modules.{context.id}",
            "__file__": str(context.location),
            "exports": {},
            "module": context,
        })
        if self.require is not None:
            scope["require"] = self.require
        if self.extract is not None:
            scope["extract"] = self.extract
        return scope

    def evaluate(self, module_id: str, location: Path) -> Result[Exports, LoadFailure]:
        """
        Execute the source file at ``location``.

        Returns:
            Result.ok(exports) or Result.err(LoadFailure) carrying the
            partially populated exports
        """
        context = ModuleContext(id=module_id, location=Path(location))
        scope = self._build_scope(context)
        try:
            source = read_source_file(context.location)
            code = compile(source, str(context.location), "exec")
            exec(code, scope)
        except Exception as e:
            partial = scope.get("exports")
            return Result.err(LoadFailure(
                module_id,
                e,
                location=context.location,
                partial_exports=partial if isinstance(partial, dict) else {},
            ))

        exports = scope.get("exports")
        if not isinstance(exports, Mapping):
            return Result.err(LoadFailure(
                module_id,
                TypeError(f"exports must be a mapping, got {type(exports).__name__}"),
                location=context.location,
            ))
        if not isinstance(exports, dict):
            exports = dict(exports)
        logger.debug(f"Evaluated module {module_id}: {len(exports)} exports")
        return Result.ok(exports)
