"""
Mod operations — install, update and uninstall against the state store.

Each operation receives the catalog and the current state explicitly
and returns a new state; nothing here reads or writes the state file.
Single-target operations (install, uninstall) raise typed errors;
update is a batch and returns one outcome per installed mod.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from lazy_installer.adapters.base import VcsAdapter
from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.core.models.catalog import Catalog
from lazy_installer.core.models.outcome import LogEntry, UpdateOutcome, UpdateReport
from lazy_installer.core.models.state import InstalledEntry, StoreState
from lazy_installer.core.services.mod_metadata import read_supported_versions
from lazy_installer.errors import (
    AlreadyInstalledError,
    CloneFailedError,
    NotInstalledError,
    RemovalFailedError,
    UnknownModError,
    VcsError,
)

logger = logging.getLogger(__name__)

LOG_DEPTH = 5
DEFAULT_WORKERS = 8


# ═══════════════════════════════════════════════════════════════════
#  Install
# ═══════════════════════════════════════════════════════════════════


def install_mod(
    name: str,
    root: Path,
    catalog: Catalog,
    state: StoreState,
    git: VcsAdapter,
    fs: FilesystemAdapter | None = None,
) -> tuple[StoreState, InstalledEntry]:
    """Clone a catalog mod into ``root/name`` and register it.

    Registration happens only after the clone completed; on any failure
    the returned state is never produced and the caller's state stays
    untouched.

    Raises:
        UnknownModError: ``name`` is not in the catalog.
        AlreadyInstalledError: The mod's remote is already registered.
        CloneFailedError: The target exists or the clone failed.
    """
    fs = fs or FilesystemAdapter()
    mod = catalog.by_name(name)
    if mod is None:
        raise UnknownModError(name)
    if state.is_installed(mod.remote):
        raise AlreadyInstalledError(name)

    target = Path(root) / name
    if target.exists():
        raise CloneFailedError(name, f"destination path {target} already exists")

    logger.info("Cloning %s into %s", mod.remote, target)
    try:
        git.clone(mod.remote, target)
    except VcsError as e:
        _discard_partial_clone(target, fs)
        raise CloneFailedError(name, str(e)) from e

    entry = InstalledEntry(
        name=name,
        mod=mod.name,
        dir=str(target),
        remote=mod.remote,
        versions=read_supported_versions(target),
    )
    new_state = state.with_entry(entry).model_copy(update={"installation_dir": str(root)})
    return new_state, entry


def _discard_partial_clone(target: Path, fs: FilesystemAdapter) -> None:
    try:
        fs.remove_tree(target)
    except OSError as e:
        logger.warning("Could not remove partial clone %s: %s", target, e)


# ═══════════════════════════════════════════════════════════════════
#  Update
# ═══════════════════════════════════════════════════════════════════


def update_mods(
    state: StoreState,
    git: VcsAdapter,
    show_log: bool = False,
    show_only_changed_log: bool = False,
    max_workers: int = DEFAULT_WORKERS,
) -> UpdateReport:
    """Fetch and pull every installed mod, concurrently.

    Never raises: each entry's failure becomes a ``failed`` outcome and
    does not affect its siblings. The returned report carries the state
    with refreshed version lists; no entry is ever added or removed.
    """
    entries = sorted(state.installed, key=lambda e: e.name.lower())
    if not entries:
        return UpdateReport(outcomes=[], state=state)

    outcomes: dict[str, UpdateOutcome] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(entries)))) as pool:
        futures = {
            pool.submit(_update_one, entry, git, show_log, show_only_changed_log): entry
            for entry in entries
        }
        for future in as_completed(futures):
            entry = futures[future]
            try:
                outcomes[entry.key] = future.result()
            except Exception as e:
                logger.exception("Unexpected error updating %s", entry.name)
                outcomes[entry.key] = UpdateOutcome.failure(entry, f"Unexpected error: {e}")

    refreshed = []
    for entry in state.installed:
        outcome = outcomes[entry.key]
        if outcome.ok:
            entry = entry.model_copy(update={"versions": read_supported_versions(Path(entry.dir))})
        refreshed.append(entry)

    return UpdateReport(
        outcomes=[outcomes[e.key] for e in entries],
        state=state.model_copy(update={"installed": refreshed}),
    )


def _update_one(
    entry: InstalledEntry,
    git: VcsAdapter,
    show_log: bool,
    show_only_changed_log: bool,
) -> UpdateOutcome:
    path = Path(entry.dir)
    if not path.is_dir() or not git.is_checkout(path):
        return UpdateOutcome.failure(entry, f"{entry.dir} is not a git checkout")

    try:
        before = git.rev_parse(path, "HEAD")
        git.fetch(path)
        git.pull(path)
        after = git.rev_parse(path, "HEAD")
    except VcsError as e:
        logger.info("Update of %s failed: %s", entry.name, e)
        return UpdateOutcome.failure(entry, str(e))

    outcome = UpdateOutcome.success(entry, before, after)
    if show_log or (show_only_changed_log and outcome.status == "updated"):
        try:
            outcome.log = [
                LogEntry(hash=c.short_hash, message=c.message)
                for c in git.log(path, max_count=LOG_DEPTH)
            ]
        except VcsError as e:
            logger.warning("Cannot read history of %s: %s", entry.name, e)
    return outcome


# ═══════════════════════════════════════════════════════════════════
#  Uninstall
# ═══════════════════════════════════════════════════════════════════


def uninstall_mod(
    name: str,
    catalog: Catalog,
    state: StoreState,
    fs: FilesystemAdapter | None = None,
) -> tuple[StoreState, InstalledEntry]:
    """Remove a registered mod's checkout and de-register it.

    The ``.git`` metadata goes first, then the directory, so an
    interrupted uninstall leaves an inert plain directory rather than a
    checkout that update would still operate on.

    Raises:
        UnknownModError: ``name`` is not in the catalog.
        NotInstalledError: The mod is not registered. Nothing is touched.
        RemovalFailedError: Either removal step failed; the entry stays
            registered.
    """
    fs = fs or FilesystemAdapter()
    mod = catalog.by_name(name)
    if mod is None:
        raise UnknownModError(name)
    entry = state.find(mod.remote)
    if entry is None:
        raise NotInstalledError(name)

    path = Path(entry.dir)
    logger.info("Removing %s", path)
    try:
        fs.remove_tree(path / ".git")
        fs.remove_tree(path)
    except OSError as e:
        raise RemovalFailedError(name, entry.dir, e.strerror or str(e)) from e

    return state.without_remote(mod.remote), entry
