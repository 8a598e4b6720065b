"""
Install use case — clone a catalog mod and register it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from lazy_installer.adapters.base import VcsAdapter
from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.adapters.vcs.git import GitAdapter
from lazy_installer.core.config.loader import load_catalog, resolve_mods_dir, resolve_state_path
from lazy_installer.core.models.state import InstalledEntry
from lazy_installer.core.persistence.state_file import load_state, save_state
from lazy_installer.core.services.mod_ops import install_mod
from lazy_installer.errors import LazyInstallerError

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    name: str
    entry: InstalledEntry | None = None
    error: str | None = None
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.error:
            return {"name": self.name, "error": self.error, "error_code": self.error_code}
        assert self.entry is not None
        return {"name": self.name, "installed": self.entry.model_dump(mode="json")}


def run_install(
    name: str,
    mods_dir: Path | None = None,
    catalog_path: Path | None = None,
    state_path: Path | None = None,
    git: VcsAdapter | None = None,
    fs: FilesystemAdapter | None = None,
) -> InstallResult:
    """Install ``name`` into the mod directory. State is saved only on success."""
    result = InstallResult(name=name)
    state_path = resolve_state_path(state_path)

    try:
        catalog = load_catalog(catalog_path)
        state = load_state(state_path)
        new_state, result.entry = install_mod(
            name,
            resolve_mods_dir(mods_dir),
            catalog,
            state,
            git or GitAdapter(),
            fs=fs,
        )
    except LazyInstallerError as e:
        result.error = str(e)
        result.error_code = e.code
        return result

    save_state(new_state, state_path)
    logger.info("Installed %s into %s", name, result.entry.dir)
    return result
