"""
Schemas for the scope membership system.

This module defines scope identifiers, snapshots, lifecycle event payloads and
the workspace file format used by the in-memory host.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScopeId(BaseModel):
    """A scope: one sub-scope (tab) of a container (frame)."""
    model_config = ConfigDict(frozen=True)

    container: str
    sub_index: int = 0

    def __str__(self) -> str:
        return f"{self.container}:{self.sub_index}"

    @classmethod
    def parse(cls, text: str) -> "ScopeId":
        """Parse 'container' or 'container:index'."""
        container, _, index = text.partition(":")
        return cls(container=container, sub_index=int(index) if index else 0)


class Snapshot(BaseModel):
    """Ordered item names captured from a scope."""
    names: List[str] = Field(default_factory=list)


class PendingWindowState(BaseModel):
    """Window state attached to a sub-scope that has not been activated yet."""
    scope: ScopeId
    window_state: Dict[str, Any] = Field(default_factory=dict)


class ScopeCreated(BaseModel):
    scope: ScopeId


class ScopeDuplicated(BaseModel):
    scope: ScopeId
    parent: Optional[ScopeId] = None


class ScopeAboutToSwitch(BaseModel):
    scope: ScopeId
    target: ScopeId
    # True when the target sub-scope has no stored membership of its own
    target_is_fresh: bool = False


class WindowStateCaptured(BaseModel):
    scope: ScopeId
    window_state: Dict[str, Any] = Field(default_factory=dict)


class WindowStateRestored(BaseModel):
    scope: ScopeId
    window_state: Dict[str, Any] = Field(default_factory=dict)
    focused_item: Any = None


class ItemRecord(BaseModel):
    """An item as described in a workspace file."""
    name: str
    live: bool = True
    file_path: Optional[str] = None
    project: Optional[str] = None


class ScopeRecord(BaseModel):
    """A scope as described in a workspace file."""
    container: str
    sub_index: int = 0
    active: List[str] = Field(default_factory=list)
    buried: List[str] = Field(default_factory=list)
    current_item: Optional[str] = None
    project: Optional[str] = None
    window_live: bool = True
    # Window state of a sub-scope that was created but never switched to
    pending_state: Optional[Dict[str, Any]] = None

    @property
    def scope_id(self) -> ScopeId:
        return ScopeId(container=self.container, sub_index=self.sub_index)


class WorkspaceFile(BaseModel):
    """Serialized host state: the global item list and every scope."""
    items: List[ItemRecord] = Field(default_factory=list)
    scopes: List[ScopeRecord] = Field(default_factory=list)
    current_scope: Optional[str] = None
