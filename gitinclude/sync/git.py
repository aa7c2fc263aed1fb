"""Thin async wrapper around the git command line."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from pathlib import Path

from gitinclude.errors import GitCommandError, LocalRepoError, TransportError
from gitinclude.models.checkout import CheckoutState

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600.0


class GitClient:
    """Runs the git operations needed to clone or update a checkout.

    Remote operations (clone, fetch, pull) raise ``TransportError``; local
    ones (open, checkout, inspection) raise ``LocalRepoError``.
    """

    def __init__(self, executable: str = "git", timeout: float | None = DEFAULT_TIMEOUT) -> None:
        self.executable = executable
        self.timeout = timeout

    async def clone(self, url: str, directory: Path, branch: str) -> None:
        """Clone ``url`` into ``directory`` with ``branch`` checked out."""
        directory.parent.mkdir(parents=True, exist_ok=True)
        await self._run_command(
            ["clone", "--branch", branch, "--", url, str(directory)],
            error=TransportError,
        )

    async def open(self, directory: Path) -> None:
        """Verify that ``directory`` is the top of a git working tree."""
        if not (directory / ".git").exists():
            raise LocalRepoError(f"{directory} is not a git repository")
        toplevel = await self.toplevel(directory)
        if toplevel != directory.resolve():
            raise LocalRepoError(f"{directory} is not the top of a git working tree")

    async def fetch(self, directory: Path) -> None:
        await self._run_command(["fetch", "--all"], cwd=directory, error=TransportError)

    async def checkout(self, directory: Path, branch: str) -> None:
        await self._run_command(["checkout", branch, "--"], cwd=directory, error=LocalRepoError)

    async def pull(self, directory: Path) -> None:
        await self._run_command(["pull", "--no-rebase"], cwd=directory, error=TransportError)

    async def head_commit(self, directory: Path) -> str | None:
        """Return the commit HEAD points to, or None if it does not resolve."""
        try:
            result = await self._run_command(
                ["rev-parse", "--verify", "--quiet", "HEAD"],
                cwd=directory,
                error=LocalRepoError,
            )
        except LocalRepoError:
            return None
        return result.stdout.strip() or None

    async def current_branch(self, directory: Path) -> str | None:
        """Return the checked out branch name, or None when detached."""
        try:
            result = await self._run_command(
                ["symbolic-ref", "--quiet", "--short", "HEAD"],
                cwd=directory,
                error=LocalRepoError,
            )
        except LocalRepoError:
            return None
        return result.stdout.strip() or None

    async def toplevel(self, directory: Path) -> Path | None:
        """Return the root of the working tree containing ``directory``."""
        try:
            result = await self._run_command(
                ["rev-parse", "--show-toplevel"],
                cwd=directory,
                error=LocalRepoError,
            )
        except LocalRepoError:
            return None
        output = result.stdout.strip()
        return Path(output).resolve() if output else None

    async def probe(self, directory: Path) -> CheckoutState:
        """Classify a checkout directory without touching the network.

        A directory counts as present only when it is the top of its own
        working tree and its HEAD resolves to a commit. Anything else that exists, such
        as the leftovers of an interrupted clone, is partial.
        """
        if not directory.exists():
            return CheckoutState.ABSENT
        if not (directory / ".git").exists():
            return CheckoutState.PARTIAL
        if await self.toplevel(directory) != directory.resolve():
            return CheckoutState.PARTIAL
        if await self.head_commit(directory) is None:
            return CheckoutState.PARTIAL
        return CheckoutState.PRESENT

    async def _run_command(
        self,
        args: list[str],
        cwd: Path | None = None,
        error: type[GitCommandError] = GitCommandError,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command asynchronously, raising ``error`` on failure."""
        cmd = [self.executable, *args]
        logger.debug(f"Running {' '.join(cmd)} in {cwd or Path.cwd()}")

        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        if cwd is not None:
            # Keep repository discovery from climbing into an enclosing project
            env["GIT_CEILING_DIRECTORIES"] = str(Path(cwd).resolve().parent)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=cwd,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise error(f"Cannot run {self.executable}: {e}", command=cmd) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise error(f"git {args[0]} timed out after {self.timeout}s", command=cmd) from None

        if process.returncode != 0:
            raise error(
                f"git {args[0]} failed with exit code {process.returncode}",
                command=cmd,
                returncode=process.returncode,
                stderr=stderr.decode(errors="replace"),
            )

        return subprocess.CompletedProcess(
            cmd, process.returncode, stdout.decode(errors="replace"), stderr.decode(errors="replace")
        )
