"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest


def run_git(*args: str, cwd: Path | None = None) -> str:
    """Run git synchronously with a fixed identity, returning stdout."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test User",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


class RemoteRepo:
    """A local repository used as the remote end of a clone."""

    def __init__(self, path: Path, branch: str = "main") -> None:
        self.path = path
        path.mkdir(parents=True)
        run_git("init", "--quiet", cwd=path)
        run_git("symbolic-ref", "HEAD", f"refs/heads/{branch}", cwd=path)
        self.commit("README.md", "initial\n")

    @property
    def url(self) -> str:
        return str(self.path)

    def commit(self, filename: str, content: str) -> str:
        """Write a file, commit it on the current branch and return the commit."""
        target = self.path / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        run_git("add", filename, cwd=self.path)
        run_git("commit", "--quiet", "-m", f"Update {filename}", cwd=self.path)
        return self.head()

    def create_branch(self, branch: str) -> None:
        run_git("checkout", "--quiet", "-b", branch, cwd=self.path)

    def switch(self, branch: str) -> None:
        run_git("checkout", "--quiet", branch, cwd=self.path)

    def head(self, ref: str = "HEAD") -> str:
        return run_git("rev-parse", ref, cwd=self.path)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def checkout_root(temp_dir: Path) -> Path:
    return temp_dir / "checkouts"


@pytest.fixture
def make_remote(temp_dir: Path) -> Callable[..., RemoteRepo]:
    """Factory for remotes under ``<temp_dir>/remotes/<name>``."""

    def factory(name: str = "foo.git", branch: str = "main") -> RemoteRepo:
        return RemoteRepo(temp_dir / "remotes" / name, branch=branch)

    return factory


@pytest.fixture
def git() -> Callable[..., str]:
    """Synchronous git runner for inspecting checkouts."""
    return run_git
