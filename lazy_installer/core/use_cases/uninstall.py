"""
Uninstall use case — remove a registered checkout and de-register it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.core.config.loader import load_catalog, resolve_state_path
from lazy_installer.core.models.state import InstalledEntry
from lazy_installer.core.persistence.state_file import load_state, save_state
from lazy_installer.core.services.mod_ops import uninstall_mod
from lazy_installer.errors import LazyInstallerError, RemovalFailedError

logger = logging.getLogger(__name__)


@dataclass
class UninstallResult:
    name: str
    entry: InstalledEntry | None = None
    error: str | None = None
    error_code: str | None = None
    manual_commands: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.error:
            data = {"name": self.name, "error": self.error, "error_code": self.error_code}
            if self.manual_commands:
                data["manual_commands"] = self.manual_commands
            return data
        assert self.entry is not None
        return {"name": self.name, "removed": self.entry.model_dump(mode="json")}


def run_uninstall(
    name: str,
    catalog_path: Path | None = None,
    state_path: Path | None = None,
    fs: FilesystemAdapter | None = None,
) -> UninstallResult:
    """Uninstall ``name``. On a failed removal the state file is left as is."""
    result = UninstallResult(name=name)
    state_path = resolve_state_path(state_path)

    try:
        catalog = load_catalog(catalog_path)
        state = load_state(state_path)
        new_state, result.entry = uninstall_mod(name, catalog, state, fs=fs)
    except RemovalFailedError as e:
        result.error = str(e)
        result.error_code = e.code
        result.manual_commands = e.manual_commands
        return result
    except LazyInstallerError as e:
        result.error = str(e)
        result.error_code = e.code
        return result

    save_state(new_state, state_path)
    logger.info("Uninstalled %s from %s", name, result.entry.dir)
    return result
