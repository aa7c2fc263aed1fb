"""Checkout directory naming."""

from __future__ import annotations

from gitinclude.errors import NameCollisionError, NameDerivationError
from gitinclude.models.repository import RepositorySpec

GIT_SUFFIX = ".git"


def derive_repo_name(url: str) -> str:
    """Derive the checkout directory name from a repository URL.

    Takes the last path segment and strips a single ``.git`` suffix, so
    ``https://example.com/org/foo.git`` and ``https://example.com/org/foo``
    both give ``foo``. A URL without ``/`` is used whole.
    """
    name = url.rsplit("/", 1)[-1]
    if name.endswith(GIT_SUFFIX):
        name = name[: -len(GIT_SUFFIX)]
    if not name:
        raise NameDerivationError(f"Cannot derive a repository name from '{url}'")
    return name


def check_collisions(specs: list[RepositorySpec]) -> dict[str, RepositorySpec]:
    """Map derived names to specs, failing if two distinct URLs share a name.

    The same URL declared twice is reported too, since both declarations
    would share one working tree.
    """
    by_name: dict[str, list[RepositorySpec]] = {}
    for spec in specs:
        by_name.setdefault(derive_repo_name(spec.url), []).append(spec)

    for name, declared in by_name.items():
        if len(declared) > 1:
            raise NameCollisionError(name, [spec.url for spec in declared])

    return {name: declared[0] for name, declared in by_name.items()}
