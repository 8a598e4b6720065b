"""
Error taxonomy — every failure the installer can report.

Services raise these; use cases catch them and turn them into result
objects with an ``error`` message and a stable ``error_code`` for the
CLI and ``--json`` consumers. Batch operations (reconcile, update) never
let per-entry errors escape.
"""

from __future__ import annotations


class LazyInstallerError(Exception):
    """Base class for all installer errors."""

    code = "error"


class UnknownModError(LazyInstallerError):
    """The requested name is not in the catalog."""

    code = "unknown_mod"

    def __init__(self, name: str):
        super().__init__(f"Mod {name} is not a known mod")
        self.name = name


class AlreadyInstalledError(LazyInstallerError):
    """The mod's remote is already registered in the state store."""

    code = "already_installed"

    def __init__(self, name: str, detail: str = ""):
        message = f"Mod {name} is already installed"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.name = name


class NotInstalledError(LazyInstallerError):
    """The mod is in the catalog but not registered in the state store."""

    code = "not_installed"

    def __init__(self, name: str):
        super().__init__(f"Mod {name} is not installed")
        self.name = name


class CloneFailedError(LazyInstallerError):
    """Cloning a catalog remote failed; nothing was registered."""

    code = "clone_failed"

    def __init__(self, name: str, cause: str):
        super().__init__(f"Failed to install {name}: {cause}")
        self.name = name
        self.cause = cause


class ProbeFailedError(LazyInstallerError):
    """A directory entry is not a trackable checkout."""

    code = "probe_failed"

    def __init__(self, path: str, cause: str):
        super().__init__(f"{path} is not a trackable checkout: {cause}")
        self.path = path
        self.cause = cause


class DirectoryListFailedError(LazyInstallerError):
    """The mod directory itself cannot be listed."""

    code = "directory_list_failed"

    def __init__(self, path: str, cause: str):
        super().__init__(f"Cannot read mod directory {path}: {cause}")
        self.path = path
        self.cause = cause


class RemovalFailedError(LazyInstallerError):
    """Removing a checkout failed; the entry stays registered."""

    code = "removal_failed"

    def __init__(self, name: str, directory: str, cause: str):
        super().__init__(f"Failed to uninstall {name}: {cause}")
        self.name = name
        self.directory = directory
        self.cause = cause

    @property
    def manual_commands(self) -> list[str]:
        """Literal commands the user can run to finish the cleanup by hand."""
        return [
            f'rm -rf "{self.directory}/.git"',
            f'rm -rf "{self.directory}"',
        ]


class VcsError(LazyInstallerError):
    """A git command failed (transport or filesystem)."""

    code = "vcs_error"


class CatalogError(LazyInstallerError):
    """The catalog document is missing or invalid."""

    code = "catalog_error"
