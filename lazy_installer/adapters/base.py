"""
Adapter base — the contract between services and external tools.

Services only talk to git and the filesystem through adapters, so the
reconciler and mutators can be driven by a fake in tests. Unlike the
batch layer, adapter methods raise on failure: the caller decides
whether a failure is fatal or folds into a per-entry outcome.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class Remote(BaseModel):
    """A configured remote of a checkout."""

    name: str
    fetch_url: str
    push_url: str = ""


class Commit(BaseModel):
    """One history entry."""

    hash: str
    short_hash: str
    message: str


class Adapter(ABC):
    """Abstract base class for all adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'git', 'filesystem')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the underlying tool is usable. Never raises."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class VcsAdapter(Adapter):
    """Directory-scoped version-control capability.

    Every method raises :class:`~lazy_installer.errors.VcsError` on any
    transport or filesystem failure.
    """

    @abstractmethod
    def is_checkout(self, path: Path) -> bool:
        """Whether ``path`` carries version-control metadata."""

    @abstractmethod
    def fetch(self, path: Path) -> None:
        """Refresh remote-tracking state."""

    @abstractmethod
    def remotes(self, path: Path) -> list[Remote]:
        """Configured remotes, in configuration order."""

    @abstractmethod
    def clone(self, remote: str, path: Path) -> None:
        """Clone ``remote`` into ``path``."""

    @abstractmethod
    def pull(self, path: Path) -> None:
        """Fetch and merge the tracked upstream branch."""

    @abstractmethod
    def rev_parse(self, path: Path, ref: str = "HEAD") -> str:
        """Resolve ``ref`` to a full revision id."""

    @abstractmethod
    def log(self, path: Path, max_count: int = 5) -> list[Commit]:
        """The most recent ``max_count`` commits, newest first."""
