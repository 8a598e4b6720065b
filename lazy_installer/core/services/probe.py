"""
Repository probe — is this directory entry a trackable checkout?

Refreshes remote-tracking state, then takes the first configured
remote's fetch URL as the entry's identity. Every failure mode (no
``.git``, unreadable entry, fetch failure, no remotes) raises
:class:`ProbeFailedError`; the reconciler treats them all the same way:
not a mod, skip it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from lazy_installer.adapters.base import VcsAdapter
from lazy_installer.errors import ProbeFailedError, VcsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """A successfully probed checkout."""

    path: Path
    remote: str
    revision: str


def probe_checkout(path: Path, git: VcsAdapter) -> ProbeResult:
    """Probe ``path`` for a checkout and its primary remote.

    Raises:
        ProbeFailedError: If ``path`` is not a trackable checkout.
    """
    try:
        if not path.is_dir() or not git.is_checkout(path):
            raise ProbeFailedError(str(path), "no version-control metadata")
        git.fetch(path)
        remotes = git.remotes(path)
        if not remotes:
            raise ProbeFailedError(str(path), "no remotes configured")
        revision = git.rev_parse(path, "HEAD")
    except OSError as e:
        raise ProbeFailedError(str(path), e.strerror or str(e)) from e
    except VcsError as e:
        raise ProbeFailedError(str(path), str(e)) from e

    return ProbeResult(path=path, remote=remotes[0].fetch_url, revision=revision)
