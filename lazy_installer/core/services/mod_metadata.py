"""
Mod metadata — supported game versions from ``About/About.xml``.

RimWorld mods declare the game versions they support in their About
file::

    <ModMetaData>
      <supportedVersions>
        <li>1.4</li>
        <li>1.5</li>
      </supportedVersions>
    </ModMetaData>

A missing or malformed file is not an error: the lookup yields ``[]``.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

logger = logging.getLogger(__name__)

ABOUT_PATHS = (Path("About") / "About.xml", Path("About") / "about.xml")

# Bare ampersands are common in hand-written About files
_BARE_AMPERSAND = re.compile(r"&(?!(amp|lt|gt|quot|apos|#\d+|#x[0-9a-fA-F]+);)")


def find_about_file(checkout: Path) -> Path | None:
    for relative in ABOUT_PATHS:
        candidate = checkout / relative
        if candidate.is_file():
            return candidate
    return None


def read_supported_versions(checkout: Path) -> list[str]:
    """Supported game versions declared by the mod at ``checkout``."""
    about = find_about_file(checkout)
    if about is None:
        logger.debug("No About.xml in %s", checkout)
        return []

    try:
        content = about.read_text(encoding="utf-8", errors="replace")
        root = ET.fromstring(_BARE_AMPERSAND.sub("&amp;", content.lstrip("\ufeff")))
    except (OSError, ET.ParseError) as e:
        logger.debug("Cannot parse %s: %s", about, e)
        return []

    versions = [
        li.text.strip()
        for li in root.findall("supportedVersions/li")
        if li.text and li.text.strip()
    ]
    if not versions:
        # Pre-1.0 mods declare a single target version
        target = root.findtext("targetVersion")
        if target and target.strip():
            versions = [target.strip()]
    return versions
