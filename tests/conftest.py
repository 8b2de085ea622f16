"""Shared test fixtures for pit.

Provides an isolated root directory, a clean editor environment and a
factory for stub editors (small ``sh`` scripts standing in for ``$EDITOR``).
These fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Callable

import pytest

from pit.layout import set_root
from pit.output import reset_output


# ---------------------------------------------------------------------------
# Global state reset
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals() -> None:
    """Reset the process-wide root and output manager after every test."""
    yield
    set_root(None)
    reset_output()


# ---------------------------------------------------------------------------
# Root isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def pit_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``$HOME`` at tmp_path so the default root is ``tmp_path/.pit``.

    The root directory itself is not created.

    Returns:
        The (not yet existing) root directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home / ".pit"


@pytest.fixture
def editor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use /bin/sh as the shell and clear any inherited editor settings."""
    monkeypatch.setenv("SHELL", "/bin/sh")
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.delenv("COMSPEC", raising=False)


@pytest.fixture
def stub_editor(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, editor_env: None
) -> Callable[[str], Path]:
    """Factory installing an ``sh`` script as ``$EDITOR``.

    The script receives the scratch file path as ``$1``. Every invocation
    appends that path to ``editor.log`` next to the script.

    Returns:
        A function taking the script body and returning the log path.
    """

    def _install(body: str) -> Path:
        script = tmp_path / "editor.sh"
        log = tmp_path / "editor.log"
        script.write_text(
            f'#!/bin/sh\necho "$1" >> {shlex.quote(str(log))}\n{body}\n',
            encoding="utf-8",
        )
        monkeypatch.setenv("EDITOR", f"sh {shlex.quote(str(script))}")
        return log

    return _install


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
