"""
Scope Membership Accessor.

Reads and writes a scope's two ordered item sequences (active and buried)
and builds the filtered local list that listings and switching use.
"""

import logging
from typing import Any, Iterable, List, Optional

from scopebufs.core.config import Settings
from scopebufs.core.settings import ACTIVE_SLOT, BURIED_SLOT
from scopebufs.filters.matcher import FilterSet
from scopebufs.host.base import Host
from scopebufs.scope.schemas import ScopeId

logger = logging.getLogger(__name__)


def dedupe(items: Iterable[Any]) -> List[Any]:
    """Remove duplicates, keeping the first occurrence of each item."""
    seen = set()
    unique = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return unique


class ScopeAccessor:
    """
    Access to per-scope membership.

    Only this class and the host's own display machinery mutate the active
    and buried sequences. Passing scope=None addresses the host's current
    scope.
    """

    def __init__(self, host: Host, filters: FilterSet, settings: Settings):
        self.host = host
        self.filters = filters
        self.settings = settings

    def resolve(self, scope: Optional[ScopeId]) -> Optional[ScopeId]:
        return scope if scope is not None else self.host.current_scope()

    def get_active(self, scope: Optional[ScopeId] = None) -> List[Any]:
        scope = self.resolve(scope)
        return self.host.get_slot(scope, ACTIVE_SLOT) if scope is not None else []

    def get_buried(self, scope: Optional[ScopeId] = None) -> List[Any]:
        scope = self.resolve(scope)
        return self.host.get_slot(scope, BURIED_SLOT) if scope is not None else []

    def set_active(self, scope: Optional[ScopeId], items: Iterable[Any]) -> None:
        scope = self.resolve(scope)
        if scope is not None:
            self.host.set_slot(scope, ACTIVE_SLOT, dedupe(items))

    def set_buried(self, scope: Optional[ScopeId], items: Iterable[Any]) -> None:
        scope = self.resolve(scope)
        if scope is not None:
            self.host.set_slot(scope, BURIED_SLOT, dedupe(items))

    def remove_item(self, scope: Optional[ScopeId], item: Any) -> bool:
        """
        Remove an item from both sequences of a scope.

        Returns:
            True if the item was present in either sequence
        """
        scope = self.resolve(scope)
        if scope is None:
            return False
        active = self.get_active(scope)
        buried = self.get_buried(scope)
        kept_active = [i for i in active if i != item]
        kept_buried = [i for i in buried if i != item]
        if len(kept_active) == len(active) and len(kept_buried) == len(buried):
            return False
        self.set_active(scope, kept_active)
        self.set_buried(scope, kept_buried)
        logger.debug("Removed %s from scope %s", self.host.item_name(item), scope)
        return True

    def raw(self, scope: Optional[ScopeId] = None) -> List[Any]:
        """Live items of active then buried, regardless of any toggle."""
        items = self.get_active(scope) + self.get_buried(scope)
        return [i for i in dedupe(items) if self.host.is_live(i)]

    def compute_list(
        self,
        scope: Optional[ScopeId] = None,
        include_buried: Optional[bool] = None,
        include_hidden: bool = False,
    ) -> List[Any]:
        """
        Build a scope's local item list.

        Args:
            scope: The scope, None for the current one
            include_buried: Append buried items; None uses the configured toggle
            include_hidden: Keep items matching the hidden filter

        Returns:
            Active items, then buried items if requested, without dead,
            hidden or duplicate entries
        """
        if include_buried is None:
            include_buried = self.settings.include_buried
        items = self.get_active(scope)
        if include_buried:
            items = items + self.get_buried(scope)
        result = [i for i in dedupe(items) if self.host.is_live(i)]
        if not include_hidden:
            result = [i for i in result if not self.filters.hidden.match(self.host.item_name(i))]
        return result

    def is_local(self, item: Any, scope: Optional[ScopeId] = None) -> bool:
        return item in self.compute_list(scope, include_buried=True, include_hidden=True)

    def non_local(self, scope: Optional[ScopeId] = None) -> List[Any]:
        """Live global items that are not in the scope's list."""
        local = set(self.compute_list(scope, include_buried=True, include_hidden=True))
        return [i for i in self.host.all_items() if i not in local]
