"""
Catalog refresh use case — merge the provider masterlist into a catalog file.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lazy_installer.core.config.loader import load_catalog, parse_catalog, resolve_catalog_path
from lazy_installer.core.services.catalog_sync import (
    MASTERLIST_URL,
    MergeResult,
    fetch_masterlist,
    merge_masterlist,
    write_catalog,
)
from lazy_installer.errors import LazyInstallerError


@dataclass
class RefreshResult:
    output: Path | None = None
    merge: MergeResult | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        assert self.merge is not None
        return {"output": str(self.output), **self.merge.to_dict()}


def run_catalog_refresh(
    catalog_path: Path | None = None,
    output: Path | None = None,
    url: str = MASTERLIST_URL,
    fetch: Callable[[str], dict[str, Any]] | None = None,
) -> RefreshResult:
    """Merge the masterlist at ``url`` into the catalog and write it to ``output``.

    ``output`` defaults to the source catalog file. The merged document
    is validated before it is written, so a bad merge never replaces
    a working catalog.
    """
    source = resolve_catalog_path(catalog_path)
    result = RefreshResult(output=output or source)
    assert result.output is not None

    try:
        catalog = load_catalog(source)
        records = [m.model_dump(mode="json", exclude_none=True) for m in catalog]
        result.merge = merge_masterlist(records, (fetch or fetch_masterlist)(url))
        parse_catalog(result.merge.records, source=url)
    except LazyInstallerError as e:
        result.error = str(e)
        return result

    write_catalog(result.merge.records, result.output)
    return result
