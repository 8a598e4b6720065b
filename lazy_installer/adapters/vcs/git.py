"""
Git adapter — the version-control capability behind probe, install and update.

Uses the git CLI — never raw API calls. Every call is bounded by a
subprocess timeout and never prompts for credentials.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from lazy_installer.adapters.base import Commit, Remote, VcsAdapter
from lazy_installer.errors import VcsError

logger = logging.getLogger(__name__)

# Network operations get a longer budget than local plumbing
DEFAULT_TIMEOUT = 30
NETWORK_TIMEOUT = 300

_FIELD_SEP = "\x1f"


class GitAdapter(VcsAdapter):
    """Git operations on mod checkouts."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, network_timeout: int = NETWORK_TIMEOUT):
        self._timeout = timeout
        self._network_timeout = network_timeout

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def is_checkout(self, path: Path) -> bool:
        return (path / ".git").exists()

    def fetch(self, path: Path) -> None:
        self._git(["fetch", "--quiet"], path, timeout=self._network_timeout)

    def remotes(self, path: Path) -> list[Remote]:
        output = self._git(["remote", "-v"], path)
        remotes: dict[str, Remote] = {}
        for line in output.splitlines():
            # origin\thttps://host/repo.git (fetch); the URL may contain spaces
            name, _, rest = line.partition("\t")
            url, _, kind = rest.rpartition(" ")
            if not name or not url:
                continue
            remote = remotes.setdefault(name, Remote(name=name, fetch_url=url))
            if kind == "(fetch)":
                remote.fetch_url = url
            elif kind == "(push)":
                remote.push_url = url
        return list(remotes.values())

    def clone(self, remote: str, path: Path) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VcsError(f"Cannot create {path.parent}: {e}") from e
        self._git(
            ["clone", "--quiet", remote, str(path)],
            path.parent,
            timeout=self._network_timeout,
        )

    def pull(self, path: Path) -> None:
        self._git(["pull", "--quiet", "--no-edit"], path, timeout=self._network_timeout)

    def rev_parse(self, path: Path, ref: str = "HEAD") -> str:
        return self._git(["rev-parse", ref], path).strip()

    def log(self, path: Path, max_count: int = 5) -> list[Commit]:
        output = self._git(
            [
                "log",
                f"--max-count={max_count}",
                f"--format=%H{_FIELD_SEP}%h{_FIELD_SEP}%s",
                "--no-decorate",
            ],
            path,
        )
        commits = []
        for line in output.splitlines():
            fields = line.split(_FIELD_SEP)
            if len(fields) != 3:
                continue
            commits.append(Commit(hash=fields[0], short_hash=fields[1], message=fields[2]))
        return commits

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: Path, timeout: int | None = None) -> str:
        """Run a git command and return stdout."""
        timeout = timeout or self._timeout
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
            )
        except subprocess.TimeoutExpired as e:
            raise VcsError(f"git {args[0]} timed out after {timeout}s") from e
        except OSError as e:
            raise VcsError(f"git {args[0]} could not run in {cwd}: {e}") from e

        if result.returncode != 0:
            raise VcsError(result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout
