"""
Outcome models — per-entry results of batch operations.

Batch operations (reconcile, update) never raise for a single entry.
Each entry produces an outcome; the batch returns the collected list.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from lazy_installer.core.models.state import InstalledEntry, StoreState

ScanStatus = Literal["known", "new", "unknown"]
UpdateStatus = Literal["updated", "up_to_date", "failed"]


class ScanEntry(BaseModel):
    """Classification of one probed directory entry."""

    name: str                    # directory name
    dir: str
    status: ScanStatus
    remote: str
    mod: str | None = None       # catalog slug; None when unknown


class ScanReport(BaseModel):
    """What a reconcile run saw."""

    root: str
    entries: list[ScanEntry] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)          # not a trackable checkout
    missing: list[InstalledEntry] = Field(default_factory=list)  # tracked before, not found now

    def _with_status(self, status: ScanStatus) -> list[ScanEntry]:
        return [e for e in self.entries if e.status == status]

    @property
    def known(self) -> list[ScanEntry]:
        return self._with_status("known")

    @property
    def new(self) -> list[ScanEntry]:
        return self._with_status("new")

    @property
    def unknown(self) -> list[ScanEntry]:
        return self._with_status("unknown")


class LogEntry(BaseModel):
    """One line of recent history shown after an update."""

    hash: str
    message: str


class UpdateOutcome(BaseModel):
    """Result of updating one installed mod."""

    name: str
    dir: str
    status: UpdateStatus
    revision_before: str | None = None
    revision_after: str | None = None
    log: list[LogEntry] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        entry: InstalledEntry,
        before: str,
        after: str,
        **kwargs: Any,
    ) -> UpdateOutcome:
        """Create an updated / up-to-date outcome from the two revisions."""
        return cls(
            name=entry.name,
            dir=entry.dir,
            status="updated" if before != after else "up_to_date",
            revision_before=before,
            revision_after=after,
            **kwargs,
        )

    @classmethod
    def failure(cls, entry: InstalledEntry, error: str, **kwargs: Any) -> UpdateOutcome:
        """Create a failure outcome."""
        return cls(name=entry.name, dir=entry.dir, status="failed", error=error, **kwargs)


class UpdateReport(BaseModel):
    """All update outcomes, sorted by display name."""

    outcomes: list[UpdateOutcome] = Field(default_factory=list)
    state: StoreState = Field(default_factory=StoreState)  # versions refreshed, same entries

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def updated(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "updated")

    @property
    def status(self) -> str:
        """ok, partial, or failed."""
        if self.failed == 0:
            return "ok"
        if self.failed == self.total:
            return "failed"
        return "partial"
