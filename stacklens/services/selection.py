"""Persisted stack selection."""

from __future__ import annotations

import json
import logging
from contextlib import suppress
from pathlib import Path

from stacklens.models.stacks.snapshot import StackSnapshot
from stacklens.models.stacks.stack_info import Stack

logger = logging.getLogger(__name__)


class StackSelection:
    """Remembers which stack the user picked across sessions.

    The selected id lives in a small JSON file. ``reconcile`` keeps it in
    line with published snapshots: it picks a preferred stack when nothing is
    selected and drops a selection whose stack has disappeared. Snapshots
    still loading are ignored.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._selected_id: str | None = self._read()

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def _read(self) -> str | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable stack selection %s: %s", self.path, exc)
            return None
        selected = data.get("selected_stack_id") if isinstance(data, dict) else None
        return selected if isinstance(selected, str) and selected else None

    def _write(self) -> None:
        if self._selected_id is None:
            with suppress(FileNotFoundError):
                self.path.unlink()
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps({"selected_stack_id": self._selected_id}),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("Unable to save stack selection %s: %s", self.path, exc)

    def select(self, stack_id: str | None) -> None:
        if stack_id == self._selected_id:
            return
        self._selected_id = stack_id
        self._write()

    def clear(self) -> None:
        self.select(None)

    def selected_stack(self, snapshot: StackSnapshot) -> Stack | None:
        if self._selected_id is None:
            return None
        return snapshot.get_stack(self._selected_id)

    def reconcile(self, snapshot: StackSnapshot) -> Stack | None:
        """Apply a snapshot to the selection and return the selected stack."""
        if snapshot.is_loading:
            return self.selected_stack(snapshot)

        if self._selected_id is not None and snapshot.get_stack(self._selected_id) is None:
            logger.info("Selected stack %s is gone, clearing selection", self._selected_id)
            self.clear()

        if self._selected_id is None and snapshot.stacks:
            preferred = snapshot.preferred_stack()
            if preferred is not None:
                self.select(preferred.id)
        return self.selected_stack(snapshot)
