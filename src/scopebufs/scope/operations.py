"""
Operation functions for scope membership.

This module provides the user-facing operations: clearing, removing and
burying items, killing exclusive or orphan items and isolating a scope to
its current project.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from scopebufs.core.config import Settings
from scopebufs.filters.matcher import Matcher
from scopebufs.scope.accessor import ScopeAccessor
from scopebufs.scope.algebra import ScopeAlgebra
from scopebufs.scope.schemas import ScopeId

logger = logging.getLogger(__name__)


@dataclass
class IsolateResult:
    """Outcome of isolate_by_project; project is None when nothing was done."""
    project: Optional[str] = None
    removed: List[Any] = field(default_factory=list)


class ScopeOperations:
    def __init__(self, accessor: ScopeAccessor, algebra: ScopeAlgebra, settings: Settings):
        self.accessor = accessor
        self.algebra = algebra
        self.settings = settings
        self.host = accessor.host

    def clear(self, scope: Optional[ScopeId] = None) -> None:
        """Reset a scope to just its current item."""
        scope = self.accessor.resolve(scope)
        if scope is None:
            return
        current = self.host.current_item(scope)
        self.accessor.set_active(scope, [current] if current is not None else [])
        self.accessor.set_buried(scope, [])
        logger.debug("Cleared scope %s", scope)

    def remove(self, scope: Optional[ScopeId], item: Any) -> bool:
        """
        Remove an item from a scope.

        If the focused window of the current scope displays the item, the
        host is asked to switch it to another item.

        Returns:
            True if the item was part of the scope
        """
        scope = self.accessor.resolve(scope)
        removed = self.accessor.remove_item(scope, item)
        if removed and scope == self.host.current_scope() and self.host.selected_item() == item:
            self.host.switch_away(item)
        return removed

    def remove_non_exclusive(self, scope: Optional[ScopeId] = None) -> List[Any]:
        """Remove every item that another scope also captures."""
        scope = self.accessor.resolve(scope)
        shared = self.algebra.exclusive(scope, invert=True)
        removed = [i for i in self.accessor.raw(scope) if i in shared]
        for item in removed:
            self.remove(scope, item)
        return removed

    def bury(self, scope: Optional[ScopeId], item: Any) -> None:
        """Bury an item globally and drop it from the scope."""
        self.host.bury_item(item)
        self.remove(scope, item)

    def kill_exclusive(
        self,
        scope: Optional[ScopeId] = None,
        kill_all: bool = False,
        kill_exclude: Optional[Matcher] = None,
    ) -> List[Any]:
        """
        Destroy the scope's items.

        Args:
            scope: The scope, None for the current one
            kill_all: Destroy every item of the scope, not only exclusive ones
            kill_exclude: Items whose name matches are spared; defaults to the
                configured kill-exclude filter

        Returns:
            The destroyed items
        """
        scope = self.accessor.resolve(scope)
        raw = self.accessor.raw(scope)
        if kill_all:
            candidates = raw
        else:
            exclusive = self.algebra.exclusive(scope)
            candidates = [i for i in raw if i in exclusive]
        return self._destroy(candidates, kill_exclude)

    def kill_orphans(self, kill_exclude: Optional[Matcher] = None) -> List[Any]:
        """Destroy every item that no scope captures."""
        return self._destroy(self.algebra.orphans_list(), kill_exclude)

    def _destroy(self, candidates: List[Any], kill_exclude: Optional[Matcher]) -> List[Any]:
        if kill_exclude is None:
            kill_exclude = self.accessor.filters.kill_exclude
        destroyed = []
        for item in candidates:
            if not self.host.is_live(item):
                continue
            if kill_exclude.match(self.host.item_name(item)):
                continue
            self.host.destroy_item(item)
            destroyed.append(item)
        logger.debug("Destroyed %d of %d candidates", len(destroyed), len(candidates))
        return destroyed

    def isolate_by_project(self, scope: Optional[ScopeId] = None, file_only: bool = False) -> IsolateResult:
        """
        Remove items that belong to another project than the scope's.

        Items matching the include filter are always kept. With file_only,
        only items without a file path are removed.
        """
        scope = self.accessor.resolve(scope)
        project = self.host.current_project(scope) if scope is not None else None
        if project is None:
            logger.info("Scope %s has no current project; nothing to isolate", scope)
            return IsolateResult()

        include = self.accessor.filters.include
        removed = []
        for item in self.accessor.compute_list(scope):
            if include.match(self.host.item_name(item)):
                continue
            if self.host.project_id(item) == project:
                continue
            if file_only and self.host.file_path(item) is not None:
                continue
            self.remove(scope, item)
            removed.append(item)
        logger.info("Isolated %s to project %s, removed %d items", scope, project, len(removed))
        return IsolateResult(project=project, removed=removed)

    def buffer_predicate(self, scope: Optional[ScopeId] = None) -> Callable[[Any], bool]:
        """
        Predicate the host can use when picking another item to display.

        With prefer_local_buffers, only the scope's own items qualify.
        """
        if not self.settings.prefer_local_buffers:
            return lambda item: True
        scope = self.accessor.resolve(scope)
        return lambda item: self.accessor.is_local(item, scope)
