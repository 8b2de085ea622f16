"""Tests for pit.editor -- command construction and edit detection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

from pit import editor
from pit.editor import build_command, edit_interactively, resolve_editor, resolve_shell
from pit.exceptions import EditorError

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses POSIX shell editors")


@pytest.fixture()
def posix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pit.editor._is_windows", lambda: False)


@pytest.fixture()
def windows(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pit.editor._is_windows", lambda: True)


@pytest.fixture()
def scratch(tmp_path: Path) -> Path:
    path = tmp_path / "scratch.yaml"
    path.write_text("username: u\n", encoding="utf-8")
    return path


class TestResolveEditor:
    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.setenv("EDITOR", "nano -w")
        assert resolve_editor() == "nano -w"

    def test_posix_default(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.delenv("EDITOR", raising=False)
        assert resolve_editor() == "vim"

    def test_empty_value_uses_default(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.setenv("EDITOR", "")
        assert resolve_editor() == "vim"

    def test_windows_default(self, monkeypatch: pytest.MonkeyPatch, windows: None) -> None:
        monkeypatch.delenv("EDITOR", raising=False)
        assert resolve_editor() == "notepad"


class TestResolveShell:
    def test_posix_shell_from_environment(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert resolve_shell() == "/bin/zsh"

    def test_posix_default(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.delenv("SHELL", raising=False)
        assert resolve_shell() == "/bin/sh"

    def test_windows_comspec(self, monkeypatch: pytest.MonkeyPatch, windows: None) -> None:
        monkeypatch.setenv("COMSPEC", r"C:\Windows\system32\cmd.exe")
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert resolve_shell() == r"C:\Windows\system32\cmd.exe"

    def test_windows_default(self, monkeypatch: pytest.MonkeyPatch, windows: None) -> None:
        monkeypatch.delenv("COMSPEC", raising=False)
        assert resolve_shell() == "cmd"


class TestBuildCommand:
    def test_posix(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.setenv("SHELL", "/bin/bash")
        monkeypatch.setenv("EDITOR", "vi")
        assert build_command("/tmp/pit-1.yaml") == ["/bin/bash", "-c", "vi /tmp/pit-1.yaml"]

    def test_posix_quotes_path(self, monkeypatch: pytest.MonkeyPatch, posix: None) -> None:
        monkeypatch.setenv("SHELL", "/bin/sh")
        monkeypatch.setenv("EDITOR", "code --wait")
        assert build_command("/tmp/my dir/p.yaml") == [
            "/bin/sh",
            "-c",
            "code --wait '/tmp/my dir/p.yaml'",
        ]

    def test_windows(self, monkeypatch: pytest.MonkeyPatch, windows: None) -> None:
        monkeypatch.delenv("COMSPEC", raising=False)
        monkeypatch.delenv("EDITOR", raising=False)
        assert build_command(r"C:\Temp\pit-1.yaml") == [
            "cmd",
            "/c",
            "notepad",
            r"C:\Temp\pit-1.yaml",
        ]


@posix_only
class TestEditInteractively:
    def test_unsaved_exit_is_not_an_edit(
        self, scratch: Path, stub_editor: Callable[[str], Path]
    ) -> None:
        log = stub_editor("exit 0")
        assert edit_interactively(scratch) is False
        assert log.read_text().strip() == str(scratch)
        assert scratch.read_text() == "username: u\n"

    def test_changed_mtime_is_an_edit(
        self, scratch: Path, stub_editor: Callable[[str], Path]
    ) -> None:
        stub_editor('touch -m -t 200001010000 "$1"')
        assert edit_interactively(scratch) is True

    def test_nonzero_exit_raises(self, scratch: Path, stub_editor: Callable[[str], Path]) -> None:
        stub_editor("exit 3")
        with pytest.raises(EditorError) as exc_info:
            edit_interactively(scratch)
        assert exc_info.value.returncode == 3

    def test_spawn_failure_raises(
        self, scratch: Path, monkeypatch: pytest.MonkeyPatch, editor_env: None, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("SHELL", str(tmp_path / "no-such-shell"))
        with pytest.raises(EditorError, match="Cannot launch editor") as exc_info:
            edit_interactively(scratch)
        assert exc_info.value.returncode is None

    def test_missing_file_raises_os_error(self, tmp_path: Path, editor_env: None) -> None:
        with pytest.raises(FileNotFoundError):
            edit_interactively(tmp_path / "missing.yaml")

    def test_runs_resolved_command(
        self, scratch: Path, monkeypatch: pytest.MonkeyPatch, editor_env: None
    ) -> None:
        calls = []

        class _Completed:
            returncode = 0

        def fake_run(command, stdin=None, check=False):
            calls.append((command, stdin))
            return _Completed()

        monkeypatch.setenv("EDITOR", "myeditor")
        monkeypatch.setattr(editor.subprocess, "run", fake_run)

        assert edit_interactively(scratch) is False
        assert calls == [(["/bin/sh", "-c", f"myeditor {scratch}"], None)]
