"""
End-to-end startup: settings discovery, registry population, log buffer
flush, and the command line entry point.
"""

import logging
import pytest

from extendables import boot
from extendables.__main__ import main
from extendables.shared.errors import RegistryError, SettingsError
from extendables.utils.log_buffer import BufferedLog
from tests.test_utils import make_package, write_file

pytestmark = pytest.mark.integration


@pytest.fixture
def installation(tmp_path):
    """An installation root with core-packages and site-packages."""
    root = tmp_path / "extendables"
    make_package(root / "core-packages", "strings", {
        "index.py": "exports['shout'] = lambda s: s.upper() + '!'\n",
    }, tests={"strings.specs": ""})
    make_package(root / "site-packages", "app", {
        "index.py": """
            strings = require("strings")
            exports["greeting"] = strings["shout"]("hello")
        """,
        "broken.py": "raise RuntimeError('site package is broken')\n",
    })
    return root


@pytest.fixture(autouse=True)
def reset_extendables_logger():
    logger = logging.getLogger("extendables")
    level, handlers = logger.level, list(logger.handlers)
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


class TestBoot:

    def test_boot_with_default_directories(self, installation):
        registry = boot(installation)
        assert sorted(registry) == ["app", "strings"]
        assert registry.require("app") == {"greeting": "HELLO!"}

    def test_startup_messages_flushed_in_order(self, installation, caplog):
        caplog.set_level(logging.DEBUG, logger="extendables")
        write_file(installation / "settings.conf", """
            package_directories = ["core-packages"]
            log_level = "DEBUG"
        """)
        log = BufferedLog()

        registry = boot(installation, log=log)

        assert log.attached
        messages = [r.getMessage() for r in caplog.records if r.name == "extendables"]
        assert messages == [
            "Loading Extendables with default settings",
            "Registered 1 packages: strings",
        ]
        assert sorted(registry) == ["strings"]

    def test_load_failure_logged_after_boot(self, installation, caplog):
        registry = boot(installation)
        assert registry.require("app/broken") == {}
        errors = [r for r in caplog.records if r.name == "extendables" and r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "Could not fully load broken" in errors[0].getMessage()

    def test_log_file_from_settings(self, installation):
        write_file(installation / "settings.conf", 'log_file = "extendables.log"\n')
        registry = boot(installation)
        registry.require("app/broken")
        for handler in logging.getLogger("extendables").handlers:
            handler.flush()
        content = (installation / "extendables.log").read_text(encoding="utf-8")
        assert "Could not fully load broken" in content

    def test_package_directories_override(self, installation):
        registry = boot(installation, package_directories=["site-packages"])
        assert sorted(registry) == ["app"]
        # strings is not on the search path, so app's require fails inside app
        assert registry.require("app") == {}

    def test_missing_directory_halts_startup(self, installation):
        with pytest.raises(RegistryError):
            boot(installation, package_directories=["nowhere"])

    def test_invalid_log_level(self, installation):
        write_file(installation / "settings.conf", 'log_level = "LOUD"\n')
        with pytest.raises(SettingsError):
            boot(installation)


class TestCommandLine:

    def test_lists_packages(self, installation, capsys):
        assert main(["--root", str(installation)]) == 0
        assert capsys.readouterr().out.split() == ["app", "strings"]

    def test_requires_identifiers(self, installation, capsys):
        assert main(["--root", str(installation), "app", "strings"]) == 0
        out = capsys.readouterr().out
        assert "app: greeting" in out
        assert "strings: shout" in out

    def test_missing_module_exit_status(self, installation, capsys):
        assert main(["--root", str(installation), "app/nope"]) == 1
        assert "app/nope" in capsys.readouterr().err

    def test_failed_module_exit_status(self, installation, capsys):
        assert main(["--root", str(installation), "app/broken"]) == 1
        assert "Could not fully load broken" in capsys.readouterr().err

    def test_lists_tests(self, installation, capsys):
        assert main(["--root", str(installation), "--tests"]) == 0
        out = capsys.readouterr().out
        assert "strings\t" in out
        assert "strings.specs" in out

    def test_bad_root(self, tmp_path, capsys):
        assert main(["--root", str(tmp_path / "missing")]) == 1
        assert "not a directory" in capsys.readouterr().err
