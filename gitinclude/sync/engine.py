"""Repository synchronization engine.

Each declared repository is checked out under the checkout root in a
directory named after its URL. A missing directory is cloned at the
requested branch; an existing one is opened, fetched, switched to the
branch and pulled, in that order. The first failure aborts the pass.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterable

from gitinclude.errors import (
    ConfigurationError,
    GitCommandError,
    MultipleSyncErrors,
    RepositorySyncError,
)
from gitinclude.models.checkout import (
    CheckoutInfo,
    CheckoutState,
    SyncAction,
    SyncResult,
    SyncStatus,
)
from gitinclude.models.repository import RepositorySpec
from gitinclude.sync.git import GitClient
from gitinclude.sync.naming import check_collisions, derive_repo_name
from gitinclude.sync.progress import ProgressCallback, ProgressEvent, ProgressKind

logger = logging.getLogger(__name__)


def included_dir_for(checkout_dir: Path, spec: RepositorySpec) -> Path:
    """Directory to include: the checkout, or a subdirectory of it."""
    if spec.directory:
        return checkout_dir / spec.directory
    return checkout_dir


def included_dirs(results: Iterable[SyncResult]) -> list[Path]:
    """Included directories of all ready results, in order."""
    return [r.included_dir for r in results if r.is_ready and r.included_dir is not None]


class SyncEngine:
    """Clones or updates declared repositories under a checkout root."""

    def __init__(
        self,
        git: GitClient | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.git = git or GitClient()
        self.progress_callback = progress_callback
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def _emit(self, kind: ProgressKind, repo_name: str, spec: RepositorySpec) -> None:
        if self.progress_callback:
            self.progress_callback(ProgressEvent(kind, repo_name, spec.url, spec.branch))

    @asynccontextmanager
    async def _single_flight(self, repo_name: str) -> AsyncIterator[None]:
        """Serialize syncs of one checkout name. The lock is dropped once unused."""
        lock = self._locks.get(repo_name)
        if lock is None:
            lock = self._locks[repo_name] = asyncio.Lock()
        self._lock_users[repo_name] = self._lock_users.get(repo_name, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[repo_name] -= 1
            if not self._lock_users[repo_name]:
                del self._lock_users[repo_name]
                del self._locks[repo_name]

    @staticmethod
    def _check_root(root: Path) -> Path:
        root = Path(root)
        if not root.is_absolute():
            raise ConfigurationError(f"Checkout directory must be absolute, got '{root}'")
        return root

    async def sync(self, root: Path, spec: RepositorySpec, offline: bool = False) -> SyncResult:
        """Sync one repository.

        Offline, nothing is run or written and the result carries no
        included directory. Otherwise the repository is cloned or updated
        and the included directory is returned in the result.

        Raises:
            ConfigurationError: url or branch missing, or the URL gives no name.
            RepositorySyncError: a git step failed; the cause is chained.
        """
        root = self._check_root(root)
        spec.require()
        repo_name = derive_repo_name(spec.url)
        checkout_dir = root / repo_name

        if offline:
            logger.debug(f"Offline, skipping {repo_name}")
            self._emit(ProgressKind.SKIPPED, repo_name, spec)
            return SyncResult(
                spec=spec,
                repo_name=repo_name,
                checkout_dir=checkout_dir,
                status=SyncStatus.SKIPPED,
            )

        async with self._single_flight(repo_name):
            try:
                state = await self.git.probe(checkout_dir)
                if state == CheckoutState.ABSENT:
                    action = await self._clone(repo_name, spec, checkout_dir)
                else:
                    action = await self._update(repo_name, spec, checkout_dir, state)
                commit = await self.git.head_commit(checkout_dir)
            except (GitCommandError, OSError) as e:
                logger.debug(f"Sync of {repo_name} failed: {e}")
                raise RepositorySyncError(repo_name) from e

        self._emit(ProgressKind.READY, repo_name, spec)
        return SyncResult(
            spec=spec,
            repo_name=repo_name,
            checkout_dir=checkout_dir,
            status=SyncStatus.READY,
            state=state,
            action=action,
            commit=commit,
            included_dir=included_dir_for(checkout_dir, spec),
        )

    async def _clone(self, repo_name: str, spec: RepositorySpec, checkout_dir: Path) -> SyncAction:
        self._emit(ProgressKind.CHECKING_OUT, repo_name, spec)
        await self.git.clone(spec.url, checkout_dir, spec.branch)
        return SyncAction.CLONE

    async def _update(
        self,
        repo_name: str,
        spec: RepositorySpec,
        checkout_dir: Path,
        state: CheckoutState,
    ) -> SyncAction:
        if state == CheckoutState.PARTIAL:
            logger.warning(f"{checkout_dir} does not look like a complete checkout, updating anyway")
        self._emit(ProgressKind.UPDATING, repo_name, spec)
        await self.git.open(checkout_dir)
        await self.git.fetch(checkout_dir)
        await self.git.checkout(checkout_dir, spec.branch)
        await self.git.pull(checkout_dir)
        return SyncAction.UPDATE

    def validate(self, specs: list[RepositorySpec]) -> None:
        """Check every declaration before anything is synced.

        Raises:
            ConfigurationError: a spec lacks url or branch.
            NameDerivationError: a URL gives an empty name.
            NameCollisionError: two declarations share a checkout name.
        """
        for spec in specs:
            spec.require()
        check_collisions(specs)

    async def sync_all(
        self,
        root: Path,
        specs: list[RepositorySpec],
        offline: bool = False,
        parallel: bool = False,
    ) -> list[SyncResult]:
        """Sync every declared repository, returning results in declaration order.

        Sequentially, the first failure stops the pass. In parallel mode all
        repositories run to completion and failures are raised together,
        ordered as declared.
        """
        root = self._check_root(root)
        self.validate(specs)

        if not parallel or offline:
            results: list[SyncResult] = []
            for spec in specs:
                results.append(await self.sync(root, spec, offline))
            return results

        outcomes = await asyncio.gather(
            *(self.sync(root, spec, offline) for spec in specs),
            return_exceptions=True,
        )
        errors: list[RepositorySyncError] = []
        for outcome in outcomes:
            if isinstance(outcome, RepositorySyncError):
                errors.append(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise MultipleSyncErrors(errors)
        return list(outcomes)

    async def status(self, root: Path, specs: list[RepositorySpec]) -> list[CheckoutInfo]:
        """Describe the local checkout of each declaration without any network access."""
        root = self._check_root(root)
        infos = []
        for spec in specs:
            repo_name = derive_repo_name(spec.url)
            checkout_dir = root / repo_name
            state = await self.git.probe(checkout_dir)
            branch = commit = None
            if state == CheckoutState.PRESENT:
                branch = await self.git.current_branch(checkout_dir)
                commit = await self.git.head_commit(checkout_dir)
            infos.append(
                CheckoutInfo(
                    spec=spec,
                    repo_name=repo_name,
                    checkout_dir=checkout_dir,
                    state=state,
                    branch=branch,
                    commit=commit,
                )
            )
        return infos
