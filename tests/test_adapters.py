"""
Tests for the VCS and filesystem adapters.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from lazy_installer.adapters.mock import FakeGitAdapter
from lazy_installer.adapters.shell.filesystem import FilesystemAdapter
from lazy_installer.adapters.vcs.git import GitAdapter
from lazy_installer.errors import VcsError

# ── Fake Git ─────────────────────────────────────────────────────────


class TestFakeGitAdapter:
    def test_clone_then_pull(self, tmp_path: Path):
        git = FakeGitAdapter()
        git.add_upstream("https://x/a.git", commits=1)
        git.clone("https://x/a.git", tmp_path / "a")
        before = git.rev_parse(tmp_path / "a")

        git.push_commit("https://x/a.git", "second")
        git.pull(tmp_path / "a")
        assert git.rev_parse(tmp_path / "a") != before
        assert git.log(tmp_path / "a")[0].message == "second"

    def test_clone_unknown_remote(self, tmp_path: Path):
        with pytest.raises(VcsError, match="not found"):
            FakeGitAdapter().clone("https://x/none.git", tmp_path / "none")

    def test_clone_into_non_empty(self, tmp_path: Path):
        git = FakeGitAdapter()
        git.add_upstream("https://x/a.git")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "file").write_text("x")
        with pytest.raises(VcsError, match="already exists"):
            git.clone("https://x/a.git", tmp_path / "a")

    def test_unreachable(self, tmp_path: Path):
        git = FakeGitAdapter()
        git.add_checkout(tmp_path / "a", "https://x/a.git")
        git.unreachable.add("https://x/a.git")
        with pytest.raises(VcsError, match="Could not resolve host"):
            git.fetch(tmp_path / "a")

    def test_setup_not_counted(self, tmp_path: Path):
        git = FakeGitAdapter()
        git.add_checkout(tmp_path / "a", "https://x/a.git")
        assert git.is_checkout(tmp_path / "a")
        assert git.call_count == 0


# ── Filesystem ───────────────────────────────────────────────────────


class TestFilesystemAdapter:
    def test_list_dir(self, tmp_path: Path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b.txt").write_text("")
        assert sorted(FilesystemAdapter().list_dir(tmp_path)) == ["a", "b.txt"]

    def test_list_missing(self, tmp_path: Path):
        with pytest.raises(OSError):
            FilesystemAdapter().list_dir(tmp_path / "missing")

    def test_remove_tree(self, tmp_path: Path):
        target = tmp_path / "mod"
        (target / ".git" / "objects").mkdir(parents=True)
        (target / ".git" / "objects" / "pack").write_text("data")
        (target / ".git" / "objects" / "pack").chmod(0o444)

        FilesystemAdapter().remove_tree(target)
        assert not target.exists()

    def test_remove_missing_is_noop(self, tmp_path: Path):
        FilesystemAdapter().remove_tree(tmp_path / "missing")


# ── Real Git ─────────────────────────────────────────────────────────


def _run(*args: str, cwd: Path) -> None:
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
    )


def _commit(repo: Path, filename: str, message: str) -> None:
    (repo / filename).write_text(message)
    _run("add", filename, cwd=repo)
    _run("commit", "--quiet", "-m", message, cwd=repo)


@pytest.fixture
def upstream(tmp_path: Path) -> Path:
    repo = tmp_path / "upstream"
    repo.mkdir()
    _run("init", "--quiet", cwd=repo)
    _commit(repo, "About.txt", "Initial commit")
    return repo


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitAdapter:
    def test_available(self):
        assert GitAdapter().is_available()

    def test_clone_and_inspect(self, upstream: Path, tmp_path: Path):
        git = GitAdapter()
        target = tmp_path / "Mods" / "mod"
        target.parent.mkdir()

        git.clone(str(upstream), target)
        assert git.is_checkout(target)

        remotes = git.remotes(target)
        assert remotes[0].name == "origin"
        assert remotes[0].fetch_url == str(upstream)
        assert len(git.rev_parse(target)) == 40

    def test_pull_and_log(self, upstream: Path, tmp_path: Path):
        git = GitAdapter()
        target = tmp_path / "mod"
        git.clone(str(upstream), target)
        before = git.rev_parse(target)

        _commit(upstream, "Changelog.txt", "Add changelog")
        git.fetch(target)
        git.pull(target)

        assert git.rev_parse(target) != before
        log = git.log(target, max_count=5)
        assert [c.message for c in log] == ["Add changelog", "Initial commit"]
        assert log[0].hash.startswith(log[0].short_hash)

    def test_log_max_count(self, upstream: Path, tmp_path: Path):
        for i in range(3):
            _commit(upstream, f"f{i}.txt", f"change {i}")
        git = GitAdapter()
        git.clone(str(upstream), tmp_path / "mod")
        assert len(git.log(tmp_path / "mod", max_count=2)) == 2

    def test_clone_missing_remote(self, tmp_path: Path):
        with pytest.raises(VcsError):
            GitAdapter().clone(str(tmp_path / "nope"), tmp_path / "mod")

    def test_not_a_checkout(self, tmp_path: Path):
        (tmp_path / "plain").mkdir()
        git = GitAdapter()
        assert not git.is_checkout(tmp_path / "plain")
        with pytest.raises(VcsError):
            git.rev_parse(tmp_path / "plain")

    def test_clone_creates_missing_parent(self, upstream: Path, tmp_path: Path):
        git = GitAdapter()
        target = tmp_path / "New Mods" / "mod"
        git.clone(str(upstream), target)
        assert git.is_checkout(target)

    def test_remote_path_with_spaces(self, tmp_path: Path):
        repo = tmp_path / "my upstream repo"
        repo.mkdir()
        _run("init", "--quiet", cwd=repo)
        _commit(repo, "About.txt", "Initial commit")

        git = GitAdapter()
        git.clone(str(repo), tmp_path / "mod")
        assert git.remotes(tmp_path / "mod")[0].fetch_url == str(repo)
