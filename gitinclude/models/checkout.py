"""Checkout state and sync result models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from gitinclude.models.repository import RepositorySpec


class CheckoutState(str, Enum):
    """What was found on disk for a repository before syncing."""

    ABSENT = "absent"  # No directory yet
    PRESENT = "present"  # Git metadata and a resolvable HEAD
    PARTIAL = "partial"  # Directory exists but is not a usable working tree


class SyncStatus(str, Enum):
    """Outcome of syncing one repository."""

    SKIPPED = "skipped"  # Offline, nothing was done
    READY = "ready"  # Cloned or updated


class SyncAction(str, Enum):
    """Which code path was taken."""

    NONE = "none"
    CLONE = "clone"
    UPDATE = "update"


class SyncResult(BaseModel):
    """Result of syncing one repository."""

    spec: RepositorySpec
    repo_name: str
    checkout_dir: Path
    status: SyncStatus
    state: CheckoutState | None = Field(
        default=None, description="Probed state before syncing, None when offline"
    )
    action: SyncAction = SyncAction.NONE
    commit: str | None = Field(default=None, description="HEAD after syncing")
    included_dir: Path | None = Field(
        default=None, description="Directory handed to the build"
    )

    @property
    def is_ready(self) -> bool:
        return self.status == SyncStatus.READY


class CheckoutInfo(BaseModel):
    """Offline view of a declared repository's local checkout."""

    spec: RepositorySpec
    repo_name: str
    checkout_dir: Path
    state: CheckoutState
    branch: str | None = Field(default=None, description="Currently checked out branch")
    commit: str | None = None

    @property
    def is_on_branch(self) -> bool:
        """Check if the working tree is on the declared branch."""
        return self.branch == self.spec.branch
