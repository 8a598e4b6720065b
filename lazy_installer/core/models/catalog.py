"""
Catalog model — the known, installable mods.

Loaded once per run and never mutated by the reconciler or the
mutators. A mod's identity is its remote URL, compared after
:func:`normalize_remote`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


def normalize_remote(url: str) -> str:
    """Canonical form of a remote URL for identity comparison.

    ``https://host/owner/repo.git``, ``https://host/owner/repo`` and
    ``https://host/owner/repo/`` all normalize to the same value.
    """
    url = url.strip().rstrip("/")
    return url.removesuffix(".git")


class CatalogEntry(BaseModel):
    """A known mod and its canonical remote."""

    name: str                        # short slug, unique
    remote: str                      # version-control URL (identity)
    label: str = ""                  # display name
    deprecated: bool = False
    remark: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or self.name

    @property
    def key(self) -> str:
        """Normalized remote used as the identity key."""
        return normalize_remote(self.remote)


class Catalog(BaseModel):
    """Ordered collection of catalog entries."""

    mods: list[CatalogEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> Catalog:
        seen: set[str] = set()
        for mod in self.mods:
            if mod.name in seen:
                raise ValueError(f"Duplicate catalog name: {mod.name}")
            seen.add(mod.name)
        return self

    def __len__(self) -> int:
        return len(self.mods)

    def __iter__(self):  # type: ignore[override]
        return iter(self.mods)

    def by_name(self, name: str) -> CatalogEntry | None:
        """Exact name lookup."""
        for mod in self.mods:
            if mod.name == name:
                return mod
        return None

    def by_remote(self, remote: str) -> CatalogEntry | None:
        """Lookup by remote, under normalization."""
        key = normalize_remote(remote)
        for mod in self.mods:
            if mod.key == key:
                return mod
        return None

    def is_mod_remote(self, remote: str) -> bool:
        return self.by_remote(remote) is not None
