# src/scopebufs/host/base.py
"""
Base class for host applications that own items and scopes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from scopebufs.scope.schemas import PendingWindowState, ScopeId


class Host(ABC):
    """
    Collaborator contract consumed by the membership engine.

    Items are opaque hashable handles; the engine only ever asks the host
    about them.
    Scopes are addressed by ScopeId and own two slots, "active" and "buried".
    """

    # Item primitives

    @abstractmethod
    def all_items(self) -> List[Any]:
        """Return the global item list (live items, host order)."""

    @abstractmethod
    def is_live(self, item: Any) -> bool:
        """Return whether the item has not been destroyed."""

    @abstractmethod
    def item_name(self, item: Any) -> str:
        """Return the item's name, unique among live items."""

    @abstractmethod
    def destroy_item(self, item: Any) -> None:
        """Destroy an item. Destroying a dead item is a no-op."""

    @abstractmethod
    def lookup_by_name(self, name: str) -> Optional[Any]:
        """Return the live item with this name, or None."""

    def file_path(self, item: Any) -> Optional[str]:
        return None

    def project_id(self, item: Any) -> Optional[str]:
        return None

    # Scope storage

    @abstractmethod
    def get_slot(self, scope: ScopeId, slot: str) -> List[Any]:
        """Return a copy of the scope's "active" or "buried" sequence."""

    @abstractmethod
    def set_slot(self, scope: ScopeId, slot: str, items: List[Any]) -> None:
        """Replace the scope's "active" or "buried" sequence."""

    # Enumeration

    @abstractmethod
    def scopes(self) -> List[ScopeId]:
        """Return every scope whose membership is held in slots."""

    @abstractmethod
    def current_scope(self) -> Optional[ScopeId]:
        """Return the scope that has focus."""

    @abstractmethod
    def current_item(self, scope: ScopeId) -> Optional[Any]:
        """Return the item displayed in the scope's selected window."""

    def selected_item(self) -> Optional[Any]:
        """Return the item displayed in the focused window of the focused scope."""
        scope = self.current_scope()
        return self.current_item(scope) if scope is not None else None

    def pending_window_states(self) -> List[PendingWindowState]:
        """Return window states of sub-scopes created but not yet activated."""
        return []

    # Window state

    def serialize_window(self, scope: ScopeId) -> Dict[str, Any]:
        """Return the host's own opaque window-state blob for the scope."""
        return {}

    def window_live(self, scope: ScopeId) -> bool:
        """Return whether the scope's window is fully set up."""
        return True

    # Actions

    def bury_item(self, item: Any) -> None:
        """Move the item to the end of the host's global list."""

    def switch_away(self, item: Any) -> None:
        """Make the focused window display something other than item."""

    def current_project(self, scope: ScopeId) -> Optional[str]:
        """Return the project the scope is working in, if any."""
        return None
