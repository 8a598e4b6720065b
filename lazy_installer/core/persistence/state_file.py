"""
State file persistence — atomic read/write for StoreState.

State is stored as one JSON document. Writes are atomic (write to a
temp file in the same directory, then rename) so a crash mid-write
never leaves a truncated store behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from lazy_installer.core.models.state import StoreState

logger = logging.getLogger(__name__)


def load_state(path: Path) -> StoreState:
    """Load the state document.

    Args:
        path: Path to the state JSON file.

    Returns:
        StoreState. If the file doesn't exist or is corrupt, a fresh state.
    """
    if not path.is_file():
        logger.info("No state file at %s — starting fresh", path)
        return StoreState()

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
        state = StoreState.model_validate(data)
        logger.debug(
            "Loaded state from %s (%d installed, updated_at=%s)",
            path,
            len(state.installed),
            state.updated_at,
        )
        return state
    except json.JSONDecodeError as e:
        logger.warning("Corrupt state file %s: %s — starting fresh", path, e)
        return StoreState()
    except (OSError, ValidationError) as e:
        logger.warning("Cannot load state from %s: %s — starting fresh", path, e)
        return StoreState()


def save_state(state: StoreState, path: Path) -> None:
    """Save the state document (atomic write).

    Args:
        state: The state to save.
        path: Target path for the state file.
    """
    state.touch()

    path.parent.mkdir(parents=True, exist_ok=True)

    content = json.dumps(state.to_document(), indent=2, ensure_ascii=False) + "\n"

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".state_",
            suffix=".tmp",
        )
        os.close(fd)
        tmp = Path(tmp_path)
        try:
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(path)
            logger.debug("State saved to %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.error("Failed to save state to %s: %s", path, e)
        raise
