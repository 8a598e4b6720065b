"""
Reconciler — rebuild the state store from what is actually on disk.

Scans the mod directory, probes every entry concurrently, and
cross-references each probed remote against the catalog and the prior
state. The result replaces the prior installed list wholesale: the
store always reflects current ground truth and never accumulates
stale entries. Prior entries that were not found again are reported as
``missing`` so the caller can show them, but they are not kept.

Pure logic over adapters — no persistence.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from lazy_installer.adapters.base import VcsAdapter
from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.core.models.catalog import Catalog
from lazy_installer.core.models.outcome import ScanEntry, ScanReport
from lazy_installer.core.models.state import InstalledEntry, StoreState
from lazy_installer.core.services.mod_metadata import read_supported_versions
from lazy_installer.core.services.probe import ProbeResult, probe_checkout
from lazy_installer.errors import DirectoryListFailedError, ProbeFailedError

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 8

# Stray file some platforms leave in synced folders
_ICON_ARTIFACT = "Icon\r"


def is_candidate(name: str) -> bool:
    """Whether a directory entry name is worth probing."""
    return not (name.startswith(".") or name == _ICON_ARTIFACT or ".txt" in name)


def list_candidates(root: Path, fs: FilesystemAdapter | None = None) -> list[str]:
    """Entry names under ``root`` to probe, in enumeration order.

    Raises:
        DirectoryListFailedError: If ``root`` cannot be listed.
    """
    fs = fs or FilesystemAdapter()
    try:
        names = fs.list_dir(root)
    except OSError as e:
        raise DirectoryListFailedError(str(root), e.strerror or str(e)) from e
    return [name for name in names if is_candidate(name)]


def probe_all(
    root: Path,
    names: list[str],
    git: VcsAdapter,
    max_workers: int = DEFAULT_WORKERS,
) -> dict[str, ProbeResult]:
    """Probe every entry concurrently. Failed probes are left out."""
    if not names:
        return {}

    results: dict[str, ProbeResult] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(names)))) as pool:
        futures = {pool.submit(probe_checkout, root / name, git): name for name in names}
        for future in as_completed(futures):
            name = futures[future]
            try:
                results[name] = future.result()
            except ProbeFailedError as e:
                logger.debug("Skipping %s: %s", name, e.cause)
    return results


def reconcile(
    root: Path,
    catalog: Catalog,
    prior: StoreState,
    git: VcsAdapter,
    fs: FilesystemAdapter | None = None,
    max_workers: int = DEFAULT_WORKERS,
) -> tuple[StoreState, ScanReport]:
    """Derive a fresh state from the contents of ``root``.

    Args:
        root: The mod directory to scan.
        catalog: Known mods.
        prior: The previously persisted state (only used for classification).
        git: VCS capability used to probe entries.
        fs: Filesystem capability used to list ``root``.
        max_workers: Probe concurrency.

    Returns:
        (new_state, report). ``new_state.installation_dir`` is ``root``.

    Raises:
        DirectoryListFailedError: If ``root`` cannot be listed. This is
            distinct from a directory that holds zero mods.
    """
    root = Path(root)
    names = list_candidates(root, fs)
    probes = probe_all(root, names, git, max_workers=max_workers)

    report = ScanReport(root=str(root))
    installed: list[InstalledEntry] = []
    seen: set[str] = set()

    for name in names:
        probe = probes.get(name)
        if probe is None:
            report.skipped.append(name)
            continue

        path = root / name
        mod = catalog.by_remote(probe.remote)
        if mod is None:
            report.entries.append(
                ScanEntry(name=name, dir=str(path), status="unknown", remote=probe.remote)
            )
            continue

        if mod.key in seen:
            # A second checkout of the same mod; the first one wins.
            logger.warning("%s is another checkout of %s — not tracked", path, mod.name)
            report.entries.append(
                ScanEntry(name=name, dir=str(path), status="unknown", remote=probe.remote)
            )
            continue
        seen.add(mod.key)

        status = "known" if prior.is_installed(probe.remote) else "new"
        report.entries.append(
            ScanEntry(name=name, dir=str(path), status=status, remote=probe.remote, mod=mod.name)
        )
        installed.append(
            InstalledEntry(
                name=name,
                mod=mod.name,
                dir=str(path),
                remote=probe.remote,
                versions=read_supported_versions(path),
            )
        )

    report.missing = [e for e in prior.installed if e.key not in seen]

    logger.info(
        "Scanned %s: %d tracked, %d unknown, %d missing",
        root,
        len(installed),
        len(report.unknown),
        len(report.missing),
    )
    new_state = StoreState(installation_dir=str(root), installed=installed)
    return new_state, report
