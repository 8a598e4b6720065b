"""
Check use case — reconcile the mod directory and persist the result.

Ties together catalog loading, the reconciler and state persistence.
This is what ``list`` / ``check`` run before printing anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from lazy_installer.adapters.base import VcsAdapter
from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.adapters.vcs.git import GitAdapter
from lazy_installer.core.config.loader import load_catalog, resolve_mods_dir, resolve_state_path
from lazy_installer.core.models.catalog import Catalog, CatalogEntry
from lazy_installer.core.models.outcome import ScanReport
from lazy_installer.core.models.state import StoreState
from lazy_installer.core.persistence.state_file import load_state, save_state
from lazy_installer.core.services.reconcile import reconcile
from lazy_installer.errors import LazyInstallerError

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of the check use case."""

    mods_dir: Path | None = None
    catalog: Catalog | None = None
    state: StoreState | None = None
    report: ScanReport | None = None
    installable: list[CatalogEntry] = field(default_factory=list)
    state_saved: bool = False
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            result["error_code"] = self.error_code
            return result

        result["mods_dir"] = str(self.mods_dir)
        result["state_saved"] = self.state_saved
        if self.state:
            result["installed"] = [e.model_dump(mode="json") for e in self.state.installed]
        if self.report:
            result["unknown"] = [e.model_dump(mode="json") for e in self.report.unknown]
            result["missing"] = [e.model_dump(mode="json") for e in self.report.missing]
        result["installable"] = [m.model_dump(mode="json") for m in self.installable]
        return result


def run_check(
    mods_dir: Path | None = None,
    catalog_path: Path | None = None,
    state_path: Path | None = None,
    git: VcsAdapter | None = None,
    fs: FilesystemAdapter | None = None,
    save: bool = True,
) -> CheckResult:
    """Scan the mod directory and rebuild the state store from it.

    Args:
        mods_dir: Directory to scan (default: resolved from env / cwd).
        catalog_path: Catalog document (default: resolved).
        state_path: State file (default: resolved).
        git: VCS capability (default: the git CLI).
        fs: Filesystem capability.
        save: Whether to persist the reconciled state.

    Returns:
        CheckResult with the new state and the scan report.
    """
    result = CheckResult(mods_dir=resolve_mods_dir(mods_dir))
    state_path = resolve_state_path(state_path)
    assert result.mods_dir is not None

    try:
        result.catalog = load_catalog(catalog_path)
        prior = load_state(state_path)
        result.state, result.report = reconcile(
            result.mods_dir,
            result.catalog,
            prior,
            git or GitAdapter(),
            fs=fs,
        )
    except LazyInstallerError as e:
        result.error = str(e)
        result.error_code = e.code
        return result

    result.installable = [m for m in result.catalog if not result.state.is_installed(m.remote)]

    if save:
        save_state(result.state, state_path)
        result.state_saved = True

    return result
