"""Repository declaration models."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from gitinclude.errors import ConfigurationError

DEFAULT_BRANCH = "master"
DEFAULT_CHECKOUT_DIR = ".checkouts"
CONFIG_FILENAME = "gitinclude.yaml"


class RepositorySpec(BaseModel):
    """One managed git repository."""

    url: str = Field(..., description="Git URL (https, ssh or local path)")
    branch: str = Field(default=DEFAULT_BRANCH)
    directory: str | None = Field(
        default=None, description="Subdirectory of the checkout to include"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("branch", mode="before")
    @classmethod
    def default_branch(cls, value: str | None) -> str:
        # An explicit null in YAML means "use the convention"
        return DEFAULT_BRANCH if value is None else value

    @field_validator("directory")
    @classmethod
    def relative_directory(cls, value: str | None) -> str | None:
        if value is None:
            return value
        path = Path(value)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"directory must stay inside the checkout, got '{value}'")
        return value

    def require(self) -> None:
        """Fail if url or branch is empty."""
        if not self.url.strip():
            raise ConfigurationError("Repository url has not been set")
        if not self.branch.strip():
            raise ConfigurationError(f"Repository {self.url} has no branch set")


class IncludedRepositories(BaseModel):
    """The ordered collection of declared repositories and their checkout root."""

    checkout_dir: Path | None = Field(
        default=None, description="Where repositories are checked out"
    )
    repositories: list[RepositorySpec] = Field(default_factory=list)

    def repo(
        self,
        url: str,
        branch: str | None = None,
        directory: str | None = None,
    ) -> RepositorySpec:
        """Declare a repository. Branch defaults to ``master``."""
        if not url:
            raise ConfigurationError("Repository url has not been set")
        try:
            spec = RepositorySpec(url=url, branch=branch, directory=directory)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid repository {url}:\n{e}") from e
        self.repositories.append(spec)
        return spec

    def resolve_checkout_dir(self, workspace: Path) -> Path:
        """Resolve the checkout root to an absolute path.

        Relative values, and the ``.checkouts`` default, are taken relative
        to the workspace directory.
        """
        checkout_dir = self.checkout_dir or Path(DEFAULT_CHECKOUT_DIR)
        if not checkout_dir.is_absolute():
            checkout_dir = Path(workspace) / checkout_dir
        return checkout_dir.resolve()

    @classmethod
    def from_yaml(cls, path: Path) -> IncludedRepositories:
        """Load declarations from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid repository configuration in {path}:\n{e}") from e

    @classmethod
    def load(cls, workspace: Path, config_path: Path | None = None) -> IncludedRepositories:
        """Load ``gitinclude.yaml`` from the workspace, or an empty set if absent."""
        path = config_path or Path(workspace) / CONFIG_FILENAME
        if config_path is None and not path.exists():
            return cls()
        return cls.from_yaml(path)
