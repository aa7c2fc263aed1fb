"""Exception hierarchy for repository configuration and synchronization."""

from __future__ import annotations


class GitIncludeError(Exception):
    """Base class for all gitinclude errors."""


class ConfigurationError(GitIncludeError):
    """A repository declaration is missing a required value or is invalid."""


class NameDerivationError(ConfigurationError):
    """A repository URL does not yield a usable checkout directory name."""


class NameCollisionError(NameDerivationError):
    """Two declared repositories derive the same checkout directory name."""

    def __init__(self, repo_name: str, urls: list[str]) -> None:
        self.repo_name = repo_name
        self.urls = urls
        super().__init__(
            f"Repositories {', '.join(urls)} all derive the checkout name '{repo_name}'"
        )


class GitCommandError(GitIncludeError):
    """A git child process failed or timed out."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class TransportError(GitCommandError):
    """Clone, fetch or pull failed while talking to the remote."""


class LocalRepoError(GitCommandError):
    """An existing working tree could not be opened or checked out."""


class RepositorySyncError(GitIncludeError):
    """Fatal failure syncing one repository. The cause is chained."""

    def __init__(self, repo_name: str, message: str | None = None) -> None:
        self.repo_name = repo_name
        super().__init__(message or f"Unable to checkout repository '{repo_name}'")

    def __str__(self) -> str:
        base = super().__str__()
        if self.__cause__ is not None:
            return f"{base}: {self.__cause__}"
        return base


class MultipleSyncErrors(RepositorySyncError):
    """Several repositories failed during a parallel sync pass."""

    def __init__(self, errors: list[RepositorySyncError]) -> None:
        self.errors = errors
        names = ", ".join(f"'{e.repo_name}'" for e in errors)
        super().__init__(errors[0].repo_name, f"Unable to checkout repositories {names}")

    def __str__(self) -> str:
        lines = [super().__str__()]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)
