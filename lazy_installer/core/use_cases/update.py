"""
Update use case — pull every installed mod.

The batch itself never fails; the only error reported here is one that
prevents it from starting. The refreshed version lists are saved back,
with exactly the same entries as before.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lazy_installer.adapters.base import VcsAdapter
from lazy_installer.adapters.vcs.git import GitAdapter
from lazy_installer.core.config.loader import resolve_state_path
from lazy_installer.core.models.outcome import UpdateReport
from lazy_installer.core.persistence.state_file import load_state, save_state
from lazy_installer.core.services.mod_ops import update_mods


@dataclass
class UpdateResult:
    report: UpdateReport | None = None
    state_saved: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        assert self.report is not None
        return {
            "status": self.report.status,
            "total": self.report.total,
            "updated": self.report.updated,
            "failed": self.report.failed,
            "outcomes": [o.model_dump(mode="json") for o in self.report.outcomes],
        }


def run_update(
    state_path: Path | None = None,
    show_log: bool = False,
    show_only_changed_log: bool = False,
    git: VcsAdapter | None = None,
    save: bool = True,
) -> UpdateResult:
    result = UpdateResult()
    state_path = resolve_state_path(state_path)
    state = load_state(state_path)

    result.report = update_mods(
        state,
        git or GitAdapter(),
        show_log=show_log,
        show_only_changed_log=show_only_changed_log,
    )

    if save and state.installed:
        save_state(result.report.state, state_path)
        result.state_saved = True
    return result
