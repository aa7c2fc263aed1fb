"""Progress events emitted while syncing repositories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class ProgressKind(str, Enum):
    CHECKING_OUT = "checking_out"
    UPDATING = "updating"
    SKIPPED = "skipped"
    READY = "ready"


@dataclass(frozen=True)
class ProgressEvent:
    kind: ProgressKind
    repo_name: str
    url: str
    branch: str

    @property
    def message(self) -> str:
        if self.kind == ProgressKind.CHECKING_OUT:
            return f"Checking out {self.url} branch {self.branch}"
        if self.kind == ProgressKind.UPDATING:
            return f"Updating {self.url} branch {self.branch}"
        if self.kind == ProgressKind.SKIPPED:
            return f"Offline, skipping {self.url} branch {self.branch}"
        return f"Ready {self.repo_name} ({self.branch})"


ProgressCallback = Callable[[ProgressEvent], None]


class ConsoleProgress:
    """Prints progress lines to a rich console."""

    STYLES = {
        ProgressKind.CHECKING_OUT: "cyan",
        ProgressKind.UPDATING: "blue",
        ProgressKind.SKIPPED: "yellow",
        ProgressKind.READY: "green",
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def __call__(self, event: ProgressEvent) -> None:
        style = self.STYLES[event.kind]
        self.console.print(f"[{style}]{escape(event.message)}[/{style}]", highlight=False)


def log_progress(event: ProgressEvent) -> None:
    """Progress callback that writes to the module logger."""
    logger.info(event.message)
