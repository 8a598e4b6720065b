"""
StoreState — the persisted record of what is installed.

A single JSON document holding the last-known installation directory
and the installed-mod list. Whole-document read-modify-write: every
operation loads it once and saves it once.

The reconciler is the single writer of truth; install and uninstall
apply validated deltas through :meth:`StoreState.with_entry` and
:meth:`StoreState.without_remote`, which return new states.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lazy_installer.core.models.catalog import normalize_remote
from lazy_installer.errors import AlreadyInstalledError

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class InstalledEntry(BaseModel):
    """A registered checkout of a catalog mod."""

    name: str                          # on-disk directory name
    mod: str                           # catalog slug, kept for display if the catalog drops it
    dir: str                           # absolute path of the checkout
    remote: str                        # probed remote (identity)
    versions: list[str] | None = None  # supported game versions, refreshed opportunistically

    @property
    def key(self) -> str:
        return normalize_remote(self.remote)


class StoreState(BaseModel):
    """Root state model — serialized to the state file."""

    model_config = ConfigDict(populate_by_name=True)

    # ── Schema ───────────────────────────────────────────────────
    schema_version: int = 1

    # ── Content ──────────────────────────────────────────────────
    installation_dir: str = Field(default="", alias="installationDir")
    installed: list[InstalledEntry] = Field(default_factory=list, alias="installed-mods")

    # ── Timestamps ───────────────────────────────────────────────
    updated_at: str = Field(default_factory=_now_iso)

    @model_validator(mode="after")
    def _dedupe_remotes(self) -> StoreState:
        seen: set[str] = set()
        unique: list[InstalledEntry] = []
        for entry in self.installed:
            if entry.key in seen:
                logger.warning("Dropping duplicate state entry %s (%s)", entry.name, entry.remote)
                continue
            seen.add(entry.key)
            unique.append(entry)
        self.installed = unique
        return self

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def find(self, remote: str) -> InstalledEntry | None:
        """The entry registered for ``remote`` (normalized), if any."""
        key = normalize_remote(remote)
        for entry in self.installed:
            if entry.key == key:
                return entry
        return None

    def is_installed(self, remote: str) -> bool:
        return self.find(remote) is not None

    def with_entry(self, entry: InstalledEntry) -> StoreState:
        """A copy of this state with ``entry`` appended.

        Raises:
            AlreadyInstalledError: If the remote is already registered.
        """
        if self.is_installed(entry.remote):
            raise AlreadyInstalledError(entry.mod, detail=f"remote {entry.remote}")
        return self.model_copy(update={"installed": [*self.installed, entry]})

    def without_remote(self, remote: str) -> StoreState:
        """A copy of this state without the entry registered for ``remote``."""
        key = normalize_remote(remote)
        remaining = [e for e in self.installed if e.key != key]
        return self.model_copy(update={"installed": remaining})

    def to_document(self) -> dict:
        """The JSON document written to disk."""
        return self.model_dump(mode="json", by_alias=True)
