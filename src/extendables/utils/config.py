"""
Configuration constants for the Extendables module system
"""

# Module discovery constants
MODULE_SEPARATOR = "/"
MODULE_FILE_EXTENSION = ".py"
PACKAGE_CODE_DIR = "lib"  # Top-level packages keep their code here
PACKAGE_INDEX_MODULE = "index"  # A package's public surface
RESERVED_TESTS_ID = "tests"
IGNORED_ENTRY_NAMES = frozenset({"__pycache__"})

# Test discovery constants
TEST_DIR = "test"
TEST_FILE_PATTERN = "*.specs"

# Settings constants
SETTINGS_FILE_NAME = "settings.conf"
DEFAULT_PACKAGE_DIRECTORIES = ("core-packages", "site-packages")
DEFAULT_LOG_LEVEL = "INFO"
LOGGER_NAME = "extendables"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Settings file syntax
STRING_QUOTE_CHAR = '"'
