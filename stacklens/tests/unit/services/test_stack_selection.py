"""Tests for persisted stack selection."""

from __future__ import annotations

import json
from pathlib import Path

from stacklens.constants.enums import ComponentRole, ComponentStatus
from stacklens.models.stacks.snapshot import StackSnapshot
from stacklens.models.stacks.stack_info import Stack, StackComponent, StackComponents
from stacklens.services.selection import StackSelection


def _stack(namespace: str, healthy: bool = True) -> Stack:
    component = StackComponent(
        name="vllm",
        namespace=namespace,
        cluster="c1",
        role=ComponentRole.BOTH,
        status=ComponentStatus.RUNNING if healthy else ComponentStatus.ERROR,
        replicas=1,
        ready_replicas=1 if healthy else 0,
    )
    return Stack.build(namespace, "c1", StackComponents(both=(component,)))


class TestStackSelection:
    """Tests for StackSelection class."""

    def test_select_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "selection.json"
        StackSelection(path).select("a@c1")

        assert json.loads(path.read_text())["selected_stack_id"] == "a@c1"
        assert StackSelection(path).selected_id == "a@c1"

    def test_clear_removes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "selection.json"
        selection = StackSelection(path)
        selection.select("a@c1")
        selection.clear()

        assert selection.selected_id is None
        assert not path.exists()

    def test_unreadable_file_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "selection.json"
        path.write_text("{broken", encoding="utf-8")
        assert StackSelection(path).selected_id is None

    def test_auto_selects_preferred(self, tmp_path: Path) -> None:
        selection = StackSelection(tmp_path / "selection.json")
        snapshot = StackSnapshot(stacks=(_stack("a", healthy=False), _stack("b")))

        selected = selection.reconcile(snapshot)

        assert selected is not None
        assert selected.id == "b@c1"

    def test_missing_stack_cleared_then_reselected(self, tmp_path: Path) -> None:
        selection = StackSelection(tmp_path / "selection.json")
        selection.select("gone@c1")

        selected = selection.reconcile(StackSnapshot(stacks=(_stack("b"),)))

        assert selected is not None
        assert selection.selected_id == "b@c1"

    def test_missing_stack_cleared_on_empty_snapshot(self, tmp_path: Path) -> None:
        selection = StackSelection(tmp_path / "selection.json")
        selection.select("gone@c1")

        assert selection.reconcile(StackSnapshot()) is None
        assert selection.selected_id is None

    def test_loading_snapshot_ignored(self, tmp_path: Path) -> None:
        selection = StackSelection(tmp_path / "selection.json")
        selection.select("a@c1")

        selection.reconcile(StackSnapshot(is_loading=True))

        assert selection.selected_id == "a@c1"

    def test_existing_selection_kept(self, tmp_path: Path) -> None:
        selection = StackSelection(tmp_path / "selection.json")
        selection.select("a@c1")
        snapshot = StackSnapshot(stacks=(_stack("a", healthy=False), _stack("b")))

        selected = selection.reconcile(snapshot)

        assert selected is not None
        assert selected.id == "a@c1"
