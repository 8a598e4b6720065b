"""
Catalog sync — merge the community provider masterlist into the catalog.

The masterlist groups mod providers by category::

    {"providers": {"<category>": {"<slug>": {"type": "git",
                                               "name": "...",
                                               "url": "..."}}}}

Only ``git`` providers are merged. A provider whose URL matches an
existing record fills that record's missing fields; any other provider
is appended as a new record, under ``<slug>-<category>`` when another
remote already uses the slug.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lazy_installer.core.models.catalog import normalize_remote
from lazy_installer.errors import CatalogError

logger = logging.getLogger(__name__)

MASTERLIST_URL = (
    "https://gitgud.io/AblativeAbsolute/libidinous_loader_providers/-/raw/v0/providers.json"
)

_SEPARATORS = re.compile(r"[-_]")


def humanize(slug: str) -> str:
    """``rjw-some_mod`` → ``Rjw Some Mod``."""
    words = _SEPARATORS.sub(" ", slug).split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


@dataclass
class MergeResult:
    """Merged catalog records and what changed."""

    records: list[dict[str, Any]] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"total": len(self.records), "updated": self.updated, "added": self.added}


def merge_masterlist(records: list[dict[str, Any]], masterlist: dict[str, Any]) -> MergeResult:
    """Merge provider entries into catalog records (input is not mutated)."""
    result = MergeResult(records=[dict(r) for r in records])

    providers = masterlist.get("providers")
    if not isinstance(providers, dict):
        raise CatalogError("Masterlist has no 'providers' mapping")

    for category, mods in providers.items():
        if not isinstance(mods, dict):
            continue
        logger.info("Checking %s: %d mods", category, len(mods))

        for slug, info in mods.items():
            if not isinstance(info, dict) or info.get("type") != "git":
                continue
            if not isinstance(info.get("url"), str) or not info["url"]:
                continue

            provider_name = info.get("name")
            if not isinstance(provider_name, str) or not provider_name:
                provider_name = slug
            index = _find_record(result.records, info["url"])
            if index is not None:
                record = result.records[index]
                record["name"] = record.get("name") or provider_name
                record["label"] = record.get("label") or humanize(provider_name)
                record["remark"] = record.get("remark") or humanize(category)
                result.updated.append(record["name"])
                logger.debug("%s updated", record["name"])
            else:
                name = _free_name(result.records, slug, category)
                if name is None:
                    logger.warning("Skipping %s (%s): name already taken", slug, info["url"])
                    continue
                if name != slug:
                    logger.warning("%s is taken by another remote, adding %s as %s",
                                   slug, info["url"], name)
                result.records.append(
                    {
                        "name": name,
                        "label": humanize(provider_name),
                        "remote": info["url"],
                        "remark": humanize(category),
                    }
                )
                result.added.append(name)
                logger.debug("%s added", name)

    return result


def _free_name(records: list[dict[str, Any]], slug: str, category: str) -> str | None:
    """``slug``, or ``slug-category`` when another remote already uses it."""
    taken = {record.get("name") for record in records}
    for name in (slug, f"{slug}-{category}"):
        if name not in taken:
            return name
    return None


def _find_record(records: list[dict[str, Any]], url: str) -> int | None:
    key = normalize_remote(url)
    for index, record in enumerate(records):
        if normalize_remote(record.get("remote", "")) == key:
            return index
    return None


def fetch_masterlist(url: str = MASTERLIST_URL, timeout: int = 30) -> dict[str, Any]:
    """Download and decode the masterlist document.

    Raises:
        CatalogError: On network failure or invalid JSON.
    """
    logger.info("Downloading masterlist from %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": "rimworld-lazy-installer"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot download masterlist {url}: {e}") from e

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Masterlist {url} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Masterlist {url} is not a JSON object")
    return data


def write_catalog(records: list[dict[str, Any]], path: Path) -> None:
    """Write catalog records as pretty-printed JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
