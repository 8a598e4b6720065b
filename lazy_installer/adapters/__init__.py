"""Adapters — git and filesystem bindings.

Public re-exports for convenient access.
"""

from lazy_installer.adapters.base import Adapter, Commit, Remote, VcsAdapter
from lazy_installer.adapters.mock import FakeGitAdapter
from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.adapters.vcs.git import GitAdapter

__all__ = [
    "Adapter",
    "Commit",
    "FakeGitAdapter",
    "FilesystemAdapter",
    "GitAdapter",
    "Remote",
    "VcsAdapter",
]
