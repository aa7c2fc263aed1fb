"""gitinclude - Check out external git repositories and include them in a build."""

from gitinclude.errors import (
    ConfigurationError,
    GitIncludeError,
    LocalRepoError,
    RepositorySyncError,
    TransportError,
)
from gitinclude.models.repository import IncludedRepositories, RepositorySpec
from gitinclude.sync.engine import SyncEngine
from gitinclude.workspace import Workspace

__version__ = "0.1.0"
__all__ = [
    "Workspace",
    "SyncEngine",
    "RepositorySpec",
    "IncludedRepositories",
    "GitIncludeError",
    "ConfigurationError",
    "RepositorySyncError",
    "TransportError",
    "LocalRepoError",
]
