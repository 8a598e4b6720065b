"""
Filesystem adapter — directory listing and checkout removal.

Kept behind the adapter seam so uninstall failures (permissions,
files in use) can be simulated in tests.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path

from lazy_installer.adapters.base import Adapter

logger = logging.getLogger(__name__)


class FilesystemAdapter(Adapter):
    """Directory operations for the mod directory."""

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True  # filesystem is always available

    def list_dir(self, path: Path) -> list[str]:
        """Names of the immediate children of ``path``, in enumeration order.

        Raises:
            OSError: If the directory is missing, not a directory, or unreadable.
        """
        return os.listdir(path)

    def remove_tree(self, path: Path) -> None:
        """Remove a directory tree. A missing path is not an error.

        Git marks pack files read-only, which makes a plain rmtree fail
        on Windows; those are made writable and retried once.

        Raises:
            OSError: If anything under ``path`` cannot be removed.
        """
        if not path.exists():
            return
        logger.debug("Removing %s", path)
        shutil.rmtree(path, onexc=_make_writable_and_retry)


def _make_writable_and_retry(func, path, _exc) -> None:
    os.chmod(path, stat.S_IWRITE)
    func(path)
