"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from lazy_installer.core.models import Catalog, StoreState, ScanReport
"""

from lazy_installer.core.models.catalog import Catalog, CatalogEntry, normalize_remote
from lazy_installer.core.models.outcome import (
    LogEntry,
    ScanEntry,
    ScanReport,
    UpdateOutcome,
    UpdateReport,
)
from lazy_installer.core.models.state import InstalledEntry, StoreState

__all__ = [
    # catalog.py
    "Catalog",
    "CatalogEntry",
    # state.py
    "InstalledEntry",
    # outcome.py
    "LogEntry",
    "ScanEntry",
    "ScanReport",
    "StoreState",
    "UpdateOutcome",
    "UpdateReport",
    "normalize_remote",
]
