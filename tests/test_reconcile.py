"""
Tests for the repository probe and the reconciler.
"""

from pathlib import Path

import pytest

from lazy_installer.adapters.mock import FakeGitAdapter
from lazy_installer.core.models.catalog import Catalog
from lazy_installer.core.models.state import InstalledEntry, StoreState
from lazy_installer.core.services.probe import probe_checkout
from lazy_installer.core.services.reconcile import is_candidate, list_candidates, reconcile
from lazy_installer.errors import DirectoryListFailedError, ProbeFailedError

RJW_REMOTE = "https://x/rjw.git"
SEX_REMOTE = "https://x/sexperience.git"

ABOUT_XML = """<?xml version="1.0" encoding="utf-8"?>
<ModMetaData>
  <name>RJW</name>
  <supportedVersions>
    <li>1.4</li>
    <li>1.5</li>
  </supportedVersions>
</ModMetaData>
"""


class LockedGitAdapter:
    """Wraps a fake git; the entry named ``locked`` cannot be traversed."""

    def __init__(self, git: FakeGitAdapter, locked: str):
        self._git = git
        self._locked = locked

    def is_checkout(self, path: Path) -> bool:
        if path.name == self._locked:
            raise PermissionError(13, "Permission denied", str(path / ".git"))
        return self._git.is_checkout(path)

    def __getattr__(self, name: str):
        return getattr(self._git, name)


# ── Probe ────────────────────────────────────────────────────────────


class TestProbe:
    def test_found(self, mods_dir: Path, fake_git: FakeGitAdapter):
        path = fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        result = probe_checkout(path, fake_git)
        assert result.remote == RJW_REMOTE
        assert result.revision

    def test_fetches_first(self, mods_dir: Path, fake_git: FakeGitAdapter):
        path = fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        probe_checkout(path, fake_git)
        assert fake_git.call_log[0] == ("fetch", str(path))

    def test_plain_directory(self, mods_dir: Path, fake_git: FakeGitAdapter):
        (mods_dir / "plain").mkdir()
        with pytest.raises(ProbeFailedError):
            probe_checkout(mods_dir / "plain", fake_git)
        assert fake_git.call_count == 0

    def test_fetch_failure(self, mods_dir: Path, fake_git: FakeGitAdapter):
        path = fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        fake_git.unreachable.add(RJW_REMOTE)
        with pytest.raises(ProbeFailedError, match="Could not resolve host"):
            probe_checkout(path, fake_git)

    def test_unreadable_entry(self, mods_dir: Path, fake_git: FakeGitAdapter):
        path = fake_git.add_checkout(mods_dir / "locked", RJW_REMOTE)
        git = LockedGitAdapter(fake_git, locked="locked")
        with pytest.raises(ProbeFailedError, match="Permission denied"):
            probe_checkout(path, git)


# ── Candidate filtering ──────────────────────────────────────────────


class TestCandidates:
    @pytest.mark.parametrize("name", [".git", ".DS_Store", "Icon\r", "notes.txt", "a.txt.bak"])
    def test_ignored_names(self, name: str):
        assert not is_candidate(name)

    @pytest.mark.parametrize("name", ["rjw", "Icon", "txt", "mod.xml"])
    def test_candidate_names(self, name: str):
        assert is_candidate(name)

    def test_missing_root_is_fatal(self, tmp_path: Path):
        with pytest.raises(DirectoryListFailedError):
            list_candidates(tmp_path / "missing")

    def test_file_root_is_fatal(self, tmp_path: Path):
        path = tmp_path / "file"
        path.write_text("x")
        with pytest.raises(DirectoryListFailedError):
            list_candidates(path)


# ── Reconcile ────────────────────────────────────────────────────────


class TestReconcile:
    def test_empty_root(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert state.installed == []
        assert report.entries == []
        assert state.installation_dir == str(mods_dir)

    def test_new_mod_discovered(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        fake_git.add_checkout(mods_dir / "RJW-local", "https://x/rjw")
        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)

        assert len(state.installed) == 1
        entry = state.installed[0]
        assert entry.name == "RJW-local"
        assert entry.mod == "rjw"
        assert entry.dir == str(mods_dir / "RJW-local")
        assert entry.remote == "https://x/rjw"
        assert [e.status for e in report.entries] == ["new"]

    def test_known_mod(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        prior = StoreState(
            installed=[InstalledEntry(name="rjw", mod="rjw", dir="/old", remote=RJW_REMOTE)]
        )
        state, report = reconcile(mods_dir, catalog, prior, fake_git)
        assert report.known[0].name == "rjw"
        assert state.installed[0].dir == str(mods_dir / "rjw")

    def test_unknown_remote_reported_not_stored(
        self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter
    ):
        fake_git.add_checkout(mods_dir / "foreign", "https://elsewhere/foreign.git")
        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert state.installed == []
        assert [e.name for e in report.unknown] == ["foreign"]

    def test_non_checkouts_skipped(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        (mods_dir / "plain").mkdir()
        (mods_dir / "readme.txt").write_text("hi")
        fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)

        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert [e.name for e in state.installed] == ["rjw"]
        assert report.skipped == ["plain"]

    def test_filtered_entries_never_probed(
        self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter
    ):
        fake_git.add_checkout(mods_dir / ".hidden", RJW_REMOTE)
        fake_git.add_checkout(mods_dir / "old.txt.d", SEX_REMOTE)
        (mods_dir / "Icon\r").write_text("")

        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert state.installed == []
        assert fake_git.call_count == 0

    def test_unreadable_entry_skipped(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        fake_git.add_checkout(mods_dir / "locked", SEX_REMOTE)
        git = LockedGitAdapter(fake_git, locked="locked")

        state, report = reconcile(mods_dir, catalog, StoreState(), git)
        assert [e.name for e in state.installed] == ["rjw"]
        assert report.skipped == ["locked"]

    def test_unreachable_probe_skipped(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        fake_git.add_checkout(mods_dir / "sexperience", SEX_REMOTE)
        fake_git.unreachable.add(SEX_REMOTE)

        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert [e.name for e in state.installed] == ["rjw"]
        assert report.skipped == ["sexperience"]

    def test_prior_state_replaced_and_missing_reported(
        self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter
    ):
        prior = StoreState(
            installed=[
                InstalledEntry(name="gone", mod="sexperience", dir="/gone", remote=SEX_REMOTE)
            ]
        )
        fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)

        state, report = reconcile(mods_dir, catalog, prior, fake_git)
        assert [e.mod for e in state.installed] == ["rjw"]
        assert [e.name for e in report.missing] == ["gone"]

    def test_second_checkout_of_same_mod_not_tracked(
        self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter
    ):
        fake_git.add_checkout(mods_dir / "a", RJW_REMOTE)
        fake_git.add_checkout(mods_dir / "b", "https://x/rjw")

        state, report = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert len(state.installed) == 1
        assert len(report.unknown) == 1

    def test_versions_read_from_about(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        path = fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        (path / "About").mkdir()
        (path / "About" / "About.xml").write_text(ABOUT_XML)

        state, _ = reconcile(mods_dir, catalog, StoreState(), fake_git)
        assert state.installed[0].versions == ["1.4", "1.5"]

    def test_idempotent(self, mods_dir: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        fake_git.add_checkout(mods_dir / "rjw", RJW_REMOTE)
        fake_git.add_checkout(mods_dir / "sexperience", SEX_REMOTE)
        (mods_dir / "plain").mkdir()

        first, _ = reconcile(mods_dir, catalog, StoreState(), fake_git)
        second, report = reconcile(mods_dir, catalog, first, fake_git)
        first_doc, second_doc = first.to_document(), second.to_document()
        first_doc.pop("updated_at")
        second_doc.pop("updated_at")
        assert second_doc == first_doc
        assert all(e.status == "known" for e in report.entries)

    def test_missing_root_raises(self, tmp_path: Path, catalog: Catalog, fake_git: FakeGitAdapter):
        with pytest.raises(DirectoryListFailedError):
            reconcile(tmp_path / "nope", catalog, StoreState(), fake_git)
