"""Tests for the ripgrep wrapper."""

import subprocess
from pathlib import Path

import pytest

from fask.errors import ToolNotFoundError
from fask.ripgrep import build_ripgrep_command, run_ripgrep


def fake_run(returncode, stdout="", stderr=""):
    def run(command, **kwargs):
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)

    return run


class TestBuildRipgrepCommand:
    """Tests for build_ripgrep_command."""

    def test_defaults(self):
        command = build_ripgrep_command("TODO", 2, Path("src"))
        assert command == [
            "rg",
            "-e",
            "TODO",
            "-C2",
            "--color=never",
            "--line-number",
            "--column",
            "src",
        ]

    def test_file_type_and_color(self):
        command = build_ripgrep_command("FIXME", 0, Path("."), file_type="*.rs", color=True)
        assert "--color=always" in command
        assert command[-3:] == ["-g", "*.rs", "."]


class TestRunRipgrep:
    """Tests for run_ripgrep."""

    def test_returns_output(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fake_run(0, "a.py:1:1:TODO\n"))
        assert run_ripgrep("TODO", 2, Path(".")) == "a.py:1:1:TODO\n"

    def test_no_matches(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fake_run(1))
        assert run_ripgrep("TODO", 2, Path(".")) is None

    def test_error_exit_is_no_result(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fake_run(2, stderr="bad path"))
        assert run_ripgrep("TODO", 2, Path("missing")) is None

    def test_missing_rg(self, monkeypatch):
        def missing(*args, **kwargs):
            raise FileNotFoundError("rg")

        monkeypatch.setattr(subprocess, "run", missing)

        with pytest.raises(ToolNotFoundError, match="rg"):
            run_ripgrep("TODO", 2, Path("."))
