"""
Set algebra over all scopes: which items are captured, orphaned or
exclusive to one scope.
"""

from typing import Any, List, Optional, Set

from scopebufs.scope.accessor import ScopeAccessor
from scopebufs.scope.schemas import ScopeId
from scopebufs.scope.snapshot import extract_snapshot


class ScopeAlgebra:
    def __init__(self, accessor: ScopeAccessor):
        self.accessor = accessor
        self.host = accessor.host

    def captured(self, excluding: Optional[ScopeId] = None) -> Set[Any]:
        """
        Items held by any scope other than `excluding`.

        Buried items always count. Sub-scopes that were created but never
        activated contribute the items named in their window state.
        """
        result: Set[Any] = set()
        for scope in self.host.scopes():
            if scope == excluding:
                continue
            result.update(self.accessor.raw(scope))

        for pending in self.host.pending_window_states():
            if pending.scope == excluding:
                continue
            snapshot = extract_snapshot(pending.window_state)
            if snapshot is None:
                continue
            for name in snapshot.names:
                item = self.host.lookup_by_name(name)
                if item is not None:
                    result.add(item)
        return result

    def orphans(self) -> Set[Any]:
        """Live items that no scope captures."""
        return set(self.orphans_list())

    def orphans_list(self) -> List[Any]:
        """Orphans in the host's global order."""
        captured = self.captured()
        return [i for i in self.host.all_items() if i not in captured]

    def exclusive(self, scope: Optional[ScopeId] = None, invert: bool = False) -> Set[Any]:
        """
        Items of a scope that no other scope captures.

        Args:
            scope: The scope, None for the current one
            invert: Return the items that are also captured elsewhere instead
        """
        scope = self.accessor.resolve(scope)
        own = set(self.accessor.raw(scope))
        elsewhere = self.captured(excluding=scope)
        return own & elsewhere if invert else own - elsewhere

    def locate(self, item: Any) -> List[ScopeId]:
        """Scopes whose membership holds the item."""
        return [scope for scope in self.host.scopes() if item in self.accessor.raw(scope)]
