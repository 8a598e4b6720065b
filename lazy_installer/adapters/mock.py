"""
Fake git adapter — in-memory test double for the VCS capability.

Upstream repositories live in memory as commit lists. Checkouts are real
directories (so the reconciler can list them) with an empty ``.git``
marker directory; their remote and HEAD are tracked here. Remotes can be
marked unreachable to simulate transport failures.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from lazy_installer.adapters.base import Commit, Remote, VcsAdapter
from lazy_installer.errors import VcsError


class _Checkout:
    def __init__(self, remote: str, head: int):
        self.remote = remote
        self.head = head  # number of upstream commits present locally


class FakeGitAdapter(VcsAdapter):
    """In-memory git for tests.

    By default every operation succeeds. ``unreachable`` remotes fail on
    fetch, clone and pull.
    """

    def __init__(self, adapter_name: str = "fake-git", available: bool = True):
        self._name = adapter_name
        self._available = available
        self._upstreams: dict[str, list[Commit]] = {}
        self._checkouts: dict[Path, _Checkout] = {}
        self.unreachable: set[str] = set()
        self.call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        """Number of VCS calls this fake has received."""
        return len(self.call_log)

    def is_available(self) -> bool:
        return self._available

    # ── Test setup ──────────────────────────────────────────────

    def add_upstream(self, remote: str, commits: int = 1) -> None:
        """Create an upstream repository with ``commits`` commits."""
        self._upstreams[remote] = []
        for _ in range(commits):
            self.push_commit(remote)

    def push_commit(self, remote: str, message: str = "") -> Commit:
        """Add a commit to an upstream repository."""
        history = self._upstreams.setdefault(remote, [])
        index = len(history) + 1
        digest = hashlib.sha1(f"{remote}#{index}".encode()).hexdigest()
        commit = Commit(
            hash=digest,
            short_hash=digest[:7],
            message=message or f"commit {index}",
        )
        history.append(commit)
        return commit

    def add_checkout(self, path: Path, remote: str) -> Path:
        """Create a checkout directory of ``remote`` at its latest commit."""
        (path / ".git").mkdir(parents=True, exist_ok=True)
        if remote not in self._upstreams:
            self.add_upstream(remote)
        self._checkouts[path.resolve()] = _Checkout(remote, len(self._upstreams[remote]))
        return path

    # ── VcsAdapter ──────────────────────────────────────────────

    def is_checkout(self, path: Path) -> bool:
        return (path / ".git").exists()

    def fetch(self, path: Path) -> None:
        checkout = self._checkout(path, "fetch")
        self._reach(checkout.remote)

    def remotes(self, path: Path) -> list[Remote]:
        checkout = self._checkout(path, "remotes")
        return [Remote(name="origin", fetch_url=checkout.remote, push_url=checkout.remote)]

    def clone(self, remote: str, path: Path) -> None:
        self.call_log.append(("clone", str(path)))
        self._reach(remote)
        if remote not in self._upstreams:
            raise VcsError(f"repository '{remote}' not found")
        if path.exists() and any(path.iterdir()):
            raise VcsError(f"destination path '{path}' already exists and is not empty")
        self.add_checkout(path, remote)

    def pull(self, path: Path) -> None:
        checkout = self._checkout(path, "pull")
        self._reach(checkout.remote)
        checkout.head = len(self._upstreams[checkout.remote])

    def rev_parse(self, path: Path, ref: str = "HEAD") -> str:
        checkout = self._checkout(path, "rev_parse")
        return self._upstreams[checkout.remote][checkout.head - 1].hash

    def log(self, path: Path, max_count: int = 5) -> list[Commit]:
        checkout = self._checkout(path, "log")
        history = self._upstreams[checkout.remote][: checkout.head]
        return list(reversed(history))[:max_count]

    # ── Helpers ─────────────────────────────────────────────────

    def _checkout(self, path: Path, operation: str) -> _Checkout:
        self.call_log.append((operation, str(path)))
        checkout = self._checkouts.get(path.resolve())
        if checkout is None or not self.is_checkout(path):
            raise VcsError(f"fatal: not a git repository: {path}")
        return checkout

    def _reach(self, remote: str) -> None:
        if remote in self.unreachable:
            raise VcsError(f"fatal: unable to access '{remote}': Could not resolve host")
