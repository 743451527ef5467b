"""
Settings

Discovery and parsing of ``settings.conf``. A project-specific settings file
placed next to the Extendables installation (in its parent folder) wins over
the default one shipped inside it, so nobody has to edit files within the
installation itself.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, VisitError

from .config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PACKAGE_DIRECTORIES,
    SETTINGS_FILE_NAME,
    STRING_QUOTE_CHAR,
)
from .io_utils import read_source_file
from .log_buffer import BufferedLog
from ..shared.errors import SettingsError

KNOWN_KEYS = ("package_directories", "log_level", "log_file")


@dataclass
class Settings:
    """Startup configuration"""
    package_directories: List[Union[str, Path]] = field(
        default_factory=lambda: list(DEFAULT_PACKAGE_DIRECTORIES)
    )
    log_level: Union[str, int] = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    source: Optional[Path] = None  # settings file these came from, None for defaults
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, values: Dict[str, Any], source: Optional[Path] = None) -> 'Settings':
        settings = cls(source=source)
        if "package_directories" in values:
            dirs = values["package_directories"]
            if isinstance(dirs, str):
                dirs = [dirs]
            if not isinstance(dirs, list) or not all(isinstance(d, str) for d in dirs):
                raise SettingsError("package_directories must be a string or a list of strings", source)
            settings.package_directories = list(dirs)
        if "log_level" in values:
            level = values["log_level"]
            if isinstance(level, bool) or not isinstance(level, (str, int)):
                raise SettingsError("log_level must be a level name or number", source)
            settings.log_level = level
        if "log_file" in values:
            if not isinstance(values["log_file"], str):
                raise SettingsError("log_file must be a string", source)
            settings.log_file = values["log_file"]
        settings.extra = {k: v for k, v in values.items() if k not in KNOWN_KEYS}
        return settings


@v_args(inline=True)
class SettingsTransformer(Transformer):
    """Turns the parse tree into a plain dict; a repeated key keeps its last value"""

    def start(self, *pairs: Tuple[str, Any]) -> Dict[str, Any]:
        return dict(pairs)

    def pair(self, name, value) -> Tuple[str, Any]:
        return str(name), value

    def string(self, token) -> str:
        return str(token)[1:-1].replace("\\" + STRING_QUOTE_CHAR, STRING_QUOTE_CHAR)

    def integer(self, token) -> int:
        return int(token)

    def true(self) -> bool:
        return True

    def false(self) -> bool:
        return False

    def list(self, *values) -> List[Any]:
        return list(values)


@lru_cache(maxsize=1)
def _settings_parser() -> Lark:
    grammar_path = Path(__file__).parent / "settings.lark"
    return Lark.open(str(grammar_path), start="start", parser="lalr")


def parse_settings(text: str, source: Optional[Path] = None) -> Settings:
    """
    Parse settings text.

    Raises:
        SettingsError: On syntax errors or badly typed known keys
    """
    try:
        tree = _settings_parser().parse(text)
        values = SettingsTransformer().transform(tree)
    except VisitError as e:
        raise SettingsError(str(e.orig_exc), source) from e
    except LarkError as e:
        raise SettingsError(f"invalid settings: {e}", source) from e
    return Settings.from_mapping(values, source)


def find_settings_file(root: Path) -> Optional[Path]:
    """Project-specific settings (root's parent) first, then the default ones in root"""
    for candidate in (root.parent / SETTINGS_FILE_NAME, root / SETTINGS_FILE_NAME):
        if candidate.is_file():
            return candidate
    return None


def load_settings(root: Path, path: Optional[Path] = None, log: Optional[BufferedLog] = None) -> Settings:
    """
    Load the settings for an installation rooted at ``root``.

    Args:
        root: Installation root
        path: Explicit settings file (skips discovery)
        log: Startup log the choice of settings is reported to
    """
    root = Path(root)
    if path is None:
        path = find_settings_file(root)
        if path is not None and path.parent != root:
            _note(log, "Loading Extendables with project-specific settings at %s", path)
        elif path is not None:
            _note(log, "Loading Extendables with default settings")
    else:
        _note(log, "Loading Extendables with settings at %s", path)

    if path is None:
        _note(log, "No settings file found; using built-in defaults")
        return Settings()
    return parse_settings(read_source_file(path), Path(path))


def _note(log: Optional[BufferedLog], template: str, *args: Any) -> None:
    if log is not None:
        log.info(template, *args)
