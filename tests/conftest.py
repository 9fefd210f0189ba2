"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules: a temporary
home directory, a POSIX adapter confined to it, a scripted answer source
for confirmation gates, and a filesystem digest for purity checks.
"""

import hashlib
import os
from collections.abc import Callable
from pathlib import Path

import pytest
from edsctl.platform.posix import PosixAdapter
from edsctl.utils.formatting import console, err_console


class FakeAdapter(PosixAdapter):
    """POSIX adapter with a scripted process table and injectable failures.

    Attributes:
        pids: PIDs reported by find_processes.
        terminate_ok: Return value of terminate_processes.
        deny: Paths whose removal raises PermissionError.
        terminated: Number of terminate_processes calls.
    """

    def __init__(self, env: dict[str, str]) -> None:
        super().__init__(env, system_bin_dirs=())
        self.pids: list[int] = []
        self.terminate_ok = True
        self.deny: set[Path] = set()
        self.terminated = 0

    def find_processes(self) -> list[int]:
        return list(self.pids)

    def terminate_processes(self) -> bool:
        self.terminated += 1
        return self.terminate_ok

    def remove_path(self, path: Path) -> None:
        if path in self.deny:
            raise PermissionError(13, "Permission denied", str(path))
        super().remove_path(path)


class ScriptedAsk:
    """Answer source for ConfirmationGate.

    Each answer is True, False, or None for "press Enter" (take the default).

    Attributes:
        questions: Questions asked, in order.
    """

    def __init__(self, answers: list[bool | None] | None = None) -> None:
        self._answers = list(answers or [])
        self.questions: list[str] = []

    def __call__(self, question: str, default: bool) -> bool:
        self.questions.append(question)
        if not self._answers:
            raise AssertionError(f"Unexpected prompt: {question}")
        answer = self._answers.pop(0)
        return default if answer is None else answer


@pytest.fixture(autouse=True)
def unwrapped_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep long temporary paths on one output line."""
    monkeypatch.setattr(console, "soft_wrap", True)
    monkeypatch.setattr(err_console, "soft_wrap", True)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def posix_env(home: Path) -> dict[str, str]:
    """Environment confined to the temporary home, with an empty PATH."""
    return {"HOME": str(home), "PATH": "", "SHELL": "/bin/bash"}


@pytest.fixture
def adapter(posix_env: dict[str, str]) -> FakeAdapter:
    """Fake adapter over the temporary home."""
    return FakeAdapter(posix_env)


@pytest.fixture
def scripted() -> Callable[..., ScriptedAsk]:
    """Factory for scripted answer sources."""
    return ScriptedAsk


@pytest.fixture
def installed(home: Path) -> dict[str, Path]:
    """A typical installation: one binary, one config dir, one data dir."""
    binary = home / ".local" / "bin" / "evaleds"
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\necho evaleds 1.0.0\n")
    binary.chmod(0o755)

    config_dir = home / ".config" / "evaleds"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text("[defaults]\ntemperature = 0.5\n")

    data_dir = home / ".local" / "share" / "evaleds"
    data_dir.mkdir(parents=True)
    (data_dir / "evaluations").mkdir()
    (data_dir / "evaluations" / "run-1.json").write_text("{}")

    return {"binary": binary, "config": config_dir, "data": data_dir}


def tree_digest(root: Path) -> str:
    """Hash the names, types and contents of everything under ``root``."""
    digest = hashlib.sha256()
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(dirnames + filenames):
            path = Path(dirpath) / name
            digest.update(str(path.relative_to(root)).encode())
            if path.is_symlink():
                digest.update(b"L" + os.readlink(path).encode())
            elif path.is_file():
                digest.update(b"F" + path.read_bytes())
            else:
                digest.update(b"D")
    return digest.hexdigest()


@pytest.fixture
def digest() -> Callable[[Path], str]:
    """Recursive filesystem digest function."""
    return tree_digest
