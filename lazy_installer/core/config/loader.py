"""
Configuration loader — catalog documents and file locations.

The catalog is a YAML or JSON document (JSON is read through the YAML
loader) holding a list of mod records, either at the top level or under
a ``mods`` key. File locations resolve in precedence order:

    CLI option  >  environment variable  >  built-in default
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from lazy_installer.core.models.catalog import Catalog
from lazy_installer.errors import CatalogError

logger = logging.getLogger(__name__)

APP_NAME = "rimworld-lazy-installer"

# Environment overrides
ENV_CATALOG = "RLI_CATALOG"
ENV_STATE_FILE = "RLI_STATE_FILE"
ENV_MODS_DIR = "RLI_MODS_DIR"

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "mods.json"
STATE_FILE_NAME = "config.json"


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate a catalog document.

    Args:
        path: Catalog file. Defaults to :func:`resolve_catalog_path`.

    Returns:
        Validated Catalog.

    Raises:
        CatalogError: If the file is missing or invalid.
    """
    path = path or resolve_catalog_path()

    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}")

    logger.debug("Loading catalog from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid catalog document {path}: {e}") from e

    catalog = parse_catalog(data, source=str(path))
    logger.info("Loaded %d catalog mods from %s", len(catalog), path)
    return catalog


def parse_catalog(data: Any, source: str = "<catalog>") -> Catalog:
    """Validate a decoded catalog document.

    Raises:
        CatalogError: If the document is not a list of valid, uniquely named mods.
    """
    if isinstance(data, dict):
        data = data.get("mods")
    if not isinstance(data, list):
        raise CatalogError(f"Expected a list of mods in {source}")

    try:
        return Catalog.model_validate({"mods": data})
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {source}: {e}") from e


def resolve_catalog_path(explicit: Path | None = None) -> Path:
    """Catalog location: option > $RLI_CATALOG > bundled catalog."""
    if explicit is not None:
        return explicit
    env = os.environ.get(ENV_CATALOG)
    if env:
        return Path(env).expanduser()
    return BUNDLED_CATALOG


def resolve_state_path(explicit: Path | None = None) -> Path:
    """State file location: option > $RLI_STATE_FILE > user config dir."""
    if explicit is not None:
        return explicit
    env = os.environ.get(ENV_STATE_FILE)
    if env:
        return Path(env).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser() / APP_NAME / STATE_FILE_NAME


def resolve_mods_dir(explicit: Path | None = None) -> Path:
    """Mod directory: option > $RLI_MODS_DIR > current directory."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    env = os.environ.get(ENV_MODS_DIR)
    if env:
        return Path(env).expanduser().resolve()
    return Path.cwd().resolve()
