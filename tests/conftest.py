"""Shared test fixtures for specrun.

Provides the fixture API descriptions, the operation catalogs parsed from
them, an isolated configuration directory, a recording credential command
runner, and the CLI runner. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
import yaml

from specrun.models import Operations
from specrun.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a plain, colourless OutputManager and reset it after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
    to be created on next use.
    """
    set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# API description fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def products_path() -> Path:
    """Path of the OpenAPI 3.0 product catalog fixture."""
    return FIXTURES_DIR / "products.yaml"


@pytest.fixture
def swagger_path() -> Path:
    """Path of the Swagger 2.0 product catalog fixture."""
    return FIXTURES_DIR / "swagger2.yaml"


@pytest.fixture
def products_raw(products_path: Path) -> dict:
    """The product catalog as a plain, unresolved dict."""
    return yaml.safe_load(products_path.read_text())


@pytest.fixture
def products_ops(products_path: Path) -> Operations:
    """Operation catalog of the OpenAPI 3.0 fixture."""
    from specrun.parser import load_operations

    return load_operations(str(products_path))


@pytest.fixture
def swagger_ops(swagger_path: Path) -> Operations:
    """Operation catalog of the Swagger 2.0 fixture."""
    from specrun.parser import load_operations

    return load_operations(str(swagger_path))


# ---------------------------------------------------------------------------
# Credential command fixture
# ---------------------------------------------------------------------------


class FakeRunner:
    """Credential command runner that records commands instead of running them.

    Args:
        output: What every command "prints".
    """

    def __init__(self, output: str = "s3cret") -> None:
        self.output = output
        self.commands: list[str] = []

    def __call__(self, command: str) -> str:
        self.commands.append(command)
        return self.output


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A :class:`FakeRunner` printing ``s3cret``."""
    return FakeRunner()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary working directory.

    Clears all SPECRUN_* environment variables and changes the working
    directory to tmp_path, so ``.specrun.yaml`` is looked up there.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in ["SPECRUN_CONFIG", "SPECRUN_SERVER_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_config(isolated_config: Path) -> Callable[[dict], Path]:
    """Return a function that writes *profiles* to ``.specrun.yaml``."""

    def _write(profiles: dict) -> Path:
        path = isolated_config / ".specrun.yaml"
        path.write_text(yaml.safe_dump(profiles))
        return path

    return _write


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner(monkeypatch: pytest.MonkeyPatch):
    """Typer CLI test runner.

    ``NO_COLOR`` is set so diagnostics are written as plain, unwrapped text.
    """
    from typer.testing import CliRunner

    monkeypatch.setenv("NO_COLOR", "1")
    return CliRunner()
