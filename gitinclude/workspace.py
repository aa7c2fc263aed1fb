"""Main Workspace class - ties repository declarations to the sync engine."""

from __future__ import annotations

from pathlib import Path

from gitinclude.models.checkout import CheckoutInfo, SyncResult
from gitinclude.models.repository import IncludedRepositories, RepositorySpec
from gitinclude.sync.engine import SyncEngine, included_dirs
from gitinclude.sync.git import DEFAULT_TIMEOUT, GitClient
from gitinclude.sync.progress import ProgressCallback


class Workspace:
    """A directory whose build includes external git repositories."""

    def __init__(
        self,
        workspace_dir: str | Path,
        config_path: str | Path | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.workspace_dir = Path(workspace_dir)
        self.config_path = Path(config_path) if config_path else None
        self.timeout = timeout
        self.progress_callback = progress_callback

        self._config: IncludedRepositories | None = None
        self._engine: SyncEngine | None = None

    @property
    def config(self) -> IncludedRepositories:
        if self._config is None:
            self._config = IncludedRepositories.load(self.workspace_dir, self.config_path)
        return self._config

    @property
    def engine(self) -> SyncEngine:
        if self._engine is None:
            self._engine = SyncEngine(GitClient(timeout=self.timeout), self.progress_callback)
        return self._engine

    @property
    def checkout_dir(self) -> Path:
        """Absolute checkout root, resolved on each access."""
        return self.config.resolve_checkout_dir(self.workspace_dir)

    @property
    def repositories(self) -> list[RepositorySpec]:
        return self.config.repositories

    def repo(
        self, url: str, branch: str | None = None, directory: str | None = None
    ) -> RepositorySpec:
        """Declare an extra repository in addition to the configured ones."""
        return self.config.repo(url, branch=branch, directory=directory)

    async def sync(self, offline: bool = False, parallel: bool = False) -> list[SyncResult]:
        """Sync all declared repositories.

        Args:
            offline: Skip all git activity; no directories are included
            parallel: Sync repositories concurrently

        Returns:
            One result per declared repository, in declaration order
        """
        return await self.engine.sync_all(
            self.checkout_dir, self.repositories, offline=offline, parallel=parallel
        )

    async def included_dirs(self, offline: bool = False, parallel: bool = False) -> list[Path]:
        """Sync and return the directories to include in the build."""
        return included_dirs(await self.sync(offline=offline, parallel=parallel))

    async def status(self) -> list[CheckoutInfo]:
        return await self.engine.status(self.checkout_dir, self.repositories)
