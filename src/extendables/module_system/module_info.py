"""
Module System Types

Pure data structures describing the discovered module tree.
No business logic lives here.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True, eq=False)
class ModuleDescriptor:
    """
    One loadable unit: a single source file or a package directory.

    - id: local name (file/directory name up to the first dot)
    - location: alias-resolved path to the file or directory
    - is_package: True when backed by a directory
    - children: child id -> descriptor, empty for leaf modules
    - code_root: directory scanned for children (None for leaves)
    """
    id: str
    location: Path
    is_package: bool = False
    children: Mapping[str, 'ModuleDescriptor'] = field(default_factory=dict)
    code_root: Optional[Path] = None

    def __post_init__(self):
        if not self.is_package and self.children:
            raise ValueError(f"Leaf module {self.id!r} cannot have children")
        # Freeze the children view: the tree is fixed at discovery time
        object.__setattr__(self, 'children', MappingProxyType(dict(self.children)))

    def __str__(self) -> str:
        kind = "package" if self.is_package else "module"
        return f"{kind} {self.id} ({len(self.children)} children)"

    def __repr__(self) -> str:
        return (f"ModuleDescriptor(id={self.id!r}, location={self.location}, "
                f"is_package={self.is_package}, children={list(self.children.keys())})")
