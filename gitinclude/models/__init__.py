"""Data models for gitinclude."""

from gitinclude.models.checkout import (
    CheckoutInfo,
    CheckoutState,
    SyncAction,
    SyncResult,
    SyncStatus,
)
from gitinclude.models.repository import (
    CONFIG_FILENAME,
    DEFAULT_BRANCH,
    DEFAULT_CHECKOUT_DIR,
    IncludedRepositories,
    RepositorySpec,
)

__all__ = [
    # Declarations
    "RepositorySpec",
    "IncludedRepositories",
    "CONFIG_FILENAME",
    "DEFAULT_BRANCH",
    "DEFAULT_CHECKOUT_DIR",
    # Checkout state
    "CheckoutState",
    "CheckoutInfo",
    "SyncAction",
    "SyncResult",
    "SyncStatus",
]
