"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from lazy_installer.adapters.mock import FakeGitAdapter
from lazy_installer.core.models.catalog import Catalog, CatalogEntry

RJW_REMOTE = "https://x/rjw.git"
SEX_REMOTE = "https://x/sexperience.git"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch) -> None:
    """Keep tests away from the user's real config and env overrides."""
    for var in (
        "RLI_CATALOG",
        "RLI_STATE_FILE",
        "RLI_MODS_DIR",
        "RLI_LOG_LEVEL",
        "RLI_LOG_FILE",
        "RLI_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        mods=[
            CatalogEntry(name="rjw", remote=RJW_REMOTE, label="RJW"),
            CatalogEntry(name="sexperience", remote=SEX_REMOTE, label="Sexperience"),
        ]
    )


@pytest.fixture
def catalog_file(tmp_path: Path, catalog: Catalog) -> Path:
    path = tmp_path / "mods.json"
    path.write_text(json.dumps([m.model_dump(mode="json") for m in catalog]))
    return path


@pytest.fixture
def fake_git(catalog: Catalog) -> FakeGitAdapter:
    """Fake git with an upstream for every catalog mod."""
    git = FakeGitAdapter()
    for mod in catalog:
        git.add_upstream(mod.remote, commits=2)
    return git


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    path = tmp_path / "Mods"
    path.mkdir()
    return path


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "config.json"
