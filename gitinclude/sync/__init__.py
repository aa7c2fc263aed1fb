"""Repository synchronization."""

from gitinclude.sync.engine import SyncEngine, included_dir_for, included_dirs
from gitinclude.sync.git import GitClient
from gitinclude.sync.naming import check_collisions, derive_repo_name
from gitinclude.sync.progress import ConsoleProgress, ProgressEvent, ProgressKind, log_progress

__all__ = [
    "SyncEngine",
    "GitClient",
    "derive_repo_name",
    "check_collisions",
    "included_dir_for",
    "included_dirs",
    "ConsoleProgress",
    "ProgressEvent",
    "ProgressKind",
    "log_progress",
]
