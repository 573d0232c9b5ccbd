"""
In-memory host.

MemoryHost keeps items and scopes in plain Python containers. It is the
reference implementation of the Host contract, and it backs the CLI, which
loads and stores it as a JSON workspace file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from scopebufs.core.exceptions import WorkspaceError
from scopebufs.core.settings import ACTIVE_SLOT, BURIED_SLOT
from scopebufs.host.base import Host
from scopebufs.scope.schemas import (
    ItemRecord, PendingWindowState, ScopeId, ScopeRecord, WorkspaceFile
)

logger = logging.getLogger(__name__)


class MemoryItem:
    """A host item. Compared and hashed by identity, like a buffer object."""

    def __init__(
        self,
        name: str,
        file_path: Optional[str] = None,
        project: Optional[str] = None,
        live: bool = True,
    ):
        self.name = name
        self.file_path = file_path
        self.project = project
        self.live = live

    def __repr__(self) -> str:
        state = "" if self.live else " dead"
        return f"<MemoryItem {self.name}{state}>"


class _ScopeSlots:
    def __init__(self):
        self.active: List[MemoryItem] = []
        self.buried: List[MemoryItem] = []
        self.current_item: Optional[MemoryItem] = None
        self.project: Optional[str] = None
        self.window_live: bool = True


class MemoryHost(Host):
    """Host keeping everything in memory."""

    def __init__(self):
        self._items: List[MemoryItem] = []
        self._scopes: Dict[ScopeId, _ScopeSlots] = {}
        self._pending: Dict[ScopeId, Dict[str, Any]] = {}
        self._current_scope: Optional[ScopeId] = None

    # Building state

    def add_item(
        self,
        name: str,
        file_path: Optional[str] = None,
        project: Optional[str] = None,
    ) -> MemoryItem:
        item = MemoryItem(name, file_path=file_path, project=project)
        self._items.append(item)
        return item

    def add_scope(
        self,
        scope: ScopeId,
        active: Optional[List[MemoryItem]] = None,
        buried: Optional[List[MemoryItem]] = None,
        current_item: Optional[MemoryItem] = None,
        project: Optional[str] = None,
    ) -> ScopeId:
        slots = _ScopeSlots()
        slots.active = list(active or [])
        slots.buried = list(buried or [])
        slots.current_item = current_item
        slots.project = project
        self._scopes[scope] = slots
        if self._current_scope is None:
            self._current_scope = scope
        return scope

    def add_pending_scope(self, scope: ScopeId, window_state: Dict[str, Any]) -> None:
        """Register a sub-scope that exists only as stored window state."""
        self._pending[scope] = dict(window_state)

    def activate_pending(self, scope: ScopeId) -> Optional[Dict[str, Any]]:
        """Turn a pending sub-scope into a live one and return its window state."""
        state = self._pending.pop(scope, None)
        if state is not None:
            self.add_scope(scope)
        return state

    def remove_scope(self, scope: ScopeId) -> None:
        self._scopes.pop(scope, None)
        self._pending.pop(scope, None)
        if self._current_scope == scope:
            self._current_scope = next(iter(self._scopes), None)

    def set_current_scope(self, scope: ScopeId) -> None:
        if scope not in self._scopes:
            raise KeyError(f"Unknown scope {scope}")
        self._current_scope = scope

    def set_window_live(self, scope: ScopeId, live: bool) -> None:
        self._slots(scope).window_live = live

    def set_project(self, scope: ScopeId, project: Optional[str]) -> None:
        self._slots(scope).project = project

    def display(self, scope: ScopeId, item: MemoryItem) -> None:
        """Show an item in the scope, recording it at the front of active."""
        slots = self._slots(scope)
        slots.current_item = item
        slots.active = [item] + [i for i in slots.active if i is not item]
        slots.buried = [i for i in slots.buried if i is not item]

    def _slots(self, scope: ScopeId) -> _ScopeSlots:
        try:
            return self._scopes[scope]
        except KeyError:
            raise KeyError(f"Unknown scope {scope}")

    # Item primitives

    def all_items(self) -> List[MemoryItem]:
        return [i for i in self._items if i.live]

    def is_live(self, item: MemoryItem) -> bool:
        return bool(item is not None and item.live)

    def item_name(self, item: MemoryItem) -> str:
        return item.name

    def destroy_item(self, item: MemoryItem) -> None:
        if not item.live:
            return
        item.live = False
        if item in self._items:
            self._items.remove(item)
        # A destroyed item leaves every scope, as a killed buffer leaves
        # every frame's buffer list.
        for slots in self._scopes.values():
            slots.active = [i for i in slots.active if i is not item]
            slots.buried = [i for i in slots.buried if i is not item]
            if slots.current_item is item:
                slots.current_item = slots.active[0] if slots.active else None
        logger.debug("Destroyed item %s", item.name)

    def lookup_by_name(self, name: str) -> Optional[MemoryItem]:
        for item in self._items:
            if item.live and item.name == name:
                return item
        return None

    def file_path(self, item: MemoryItem) -> Optional[str]:
        return item.file_path

    def project_id(self, item: MemoryItem) -> Optional[str]:
        return item.project

    # Scope storage

    def get_slot(self, scope: ScopeId, slot: str) -> List[MemoryItem]:
        slots = self._slots(scope)
        if slot == ACTIVE_SLOT:
            return list(slots.active)
        if slot == BURIED_SLOT:
            return list(slots.buried)
        raise ValueError(f"Unknown slot {slot!r}")

    def set_slot(self, scope: ScopeId, slot: str, items: List[MemoryItem]) -> None:
        slots = self._slots(scope)
        if slot == ACTIVE_SLOT:
            slots.active = list(items)
        elif slot == BURIED_SLOT:
            slots.buried = list(items)
        else:
            raise ValueError(f"Unknown slot {slot!r}")

    # Enumeration

    def scopes(self) -> List[ScopeId]:
        return list(self._scopes)

    def current_scope(self) -> Optional[ScopeId]:
        return self._current_scope

    def current_item(self, scope: ScopeId) -> Optional[MemoryItem]:
        item = self._slots(scope).current_item
        return item if self.is_live(item) else None

    def pending_window_states(self) -> List[PendingWindowState]:
        return [
            PendingWindowState(scope=scope, window_state=state)
            for scope, state in self._pending.items()
        ]

    # Window state

    def serialize_window(self, scope: ScopeId) -> Dict[str, Any]:
        current = self.current_item(scope)
        return {"scope": str(scope), "buffer": current.name if current else None}

    def window_live(self, scope: ScopeId) -> bool:
        return self._slots(scope).window_live

    # Actions

    def bury_item(self, item: MemoryItem) -> None:
        if item in self._items:
            self._items.remove(item)
            self._items.append(item)

    def switch_away(self, item: MemoryItem) -> None:
        scope = self._current_scope
        if scope is None:
            return
        slots = self._slots(scope)
        candidates = [i for i in slots.active + slots.buried if i is not item and i.live]
        if not candidates:
            candidates = [i for i in self.all_items() if i is not item]
        if candidates:
            self.display(scope, candidates[0])
        else:
            slots.current_item = None
        logger.debug("Switched %s away from %s", scope, item.name)

    def current_project(self, scope: ScopeId) -> Optional[str]:
        return self._slots(scope).project

    # Workspace files

    @classmethod
    def from_workspace(cls, workspace: WorkspaceFile) -> "MemoryHost":
        host = cls()
        by_name: Dict[str, MemoryItem] = {}
        for record in workspace.items:
            if record.name in by_name:
                raise WorkspaceError(f"Duplicate item name in workspace: {record.name}")
            item = MemoryItem(
                record.name,
                file_path=record.file_path,
                project=record.project,
                live=record.live,
            )
            by_name[record.name] = item
            host._items.append(item)

        def resolve(name: str) -> MemoryItem:
            try:
                return by_name[name]
            except KeyError:
                raise WorkspaceError(f"Scope refers to unknown item: {name}")

        for record in workspace.scopes:
            if record.pending_state is not None:
                host.add_pending_scope(record.scope_id, record.pending_state)
                continue
            host.add_scope(
                record.scope_id,
                active=[resolve(n) for n in record.active],
                buried=[resolve(n) for n in record.buried],
                current_item=resolve(record.current_item) if record.current_item else None,
                project=record.project,
            )
            host.set_window_live(record.scope_id, record.window_live)

        if workspace.current_scope:
            try:
                host.set_current_scope(ScopeId.parse(workspace.current_scope))
            except (KeyError, ValueError) as e:
                raise WorkspaceError(f"Invalid current scope: {workspace.current_scope}") from e
        return host

    def to_workspace(self) -> WorkspaceFile:
        items = [
            ItemRecord(name=i.name, live=i.live, file_path=i.file_path, project=i.project)
            for i in self._items
        ]
        scopes = []
        for scope, slots in self._scopes.items():
            scopes.append(ScopeRecord(
                container=scope.container,
                sub_index=scope.sub_index,
                active=[i.name for i in slots.active if i.live],
                buried=[i.name for i in slots.buried if i.live],
                current_item=slots.current_item.name if self.is_live(slots.current_item) else None,
                project=slots.project,
                window_live=slots.window_live,
            ))
        for scope, state in self._pending.items():
            scopes.append(ScopeRecord(
                container=scope.container,
                sub_index=scope.sub_index,
                pending_state=state,
            ))
        return WorkspaceFile(
            items=items,
            scopes=scopes,
            current_scope=str(self._current_scope) if self._current_scope else None,
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "MemoryHost":
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            workspace = WorkspaceFile.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise WorkspaceError(f"Cannot read workspace {path}: {e}") from e
        logger.debug("Loaded workspace %s", path)
        return cls.from_workspace(workspace)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.write_text(self.to_workspace().model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Saved workspace %s", path)
