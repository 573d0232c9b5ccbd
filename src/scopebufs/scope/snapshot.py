"""
Snapshot Codec.

A scope's membership travels inside the host's opaque window-state blob as
an ordered list of item names under a reserved key. Restoring resolves the
names back to live items.

Restore does not keep the active/buried split: everything recorded comes
back as active, with only the focused item buried.
"""

import logging
from typing import Any, Dict, Optional

from scopebufs.core.settings import SNAPSHOT_KEY
from scopebufs.events import CallContext
from scopebufs.scope.accessor import ScopeAccessor, dedupe
from scopebufs.scope.schemas import ScopeId, Snapshot

logger = logging.getLogger(__name__)


def extract_snapshot(window_state: Optional[Dict[str, Any]]) -> Optional[Snapshot]:
    """Return the snapshot stored in a window-state blob, if any."""
    if not window_state:
        return None
    names = window_state.get(SNAPSHOT_KEY)
    if not isinstance(names, (list, tuple)):
        return None
    return Snapshot(names=[n for n in names if isinstance(n, str)])


class SnapshotCodec:
    def __init__(self, accessor: ScopeAccessor):
        self.accessor = accessor
        self.host = accessor.host

    def snapshot(self, scope: Optional[ScopeId] = None) -> Snapshot:
        """Names of the scope's live items, active then buried."""
        items = self.accessor.get_active(scope) + self.accessor.get_buried(scope)
        return Snapshot(names=[
            self.host.item_name(i) for i in dedupe(items) if self.host.is_live(i)
        ])

    def capture(
        self,
        scope: Optional[ScopeId] = None,
        window_state: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Embed the scope's membership into a window-state blob.

        Args:
            scope: The scope to capture, None for the current one
            window_state: The host's blob; serialized from the host if None

        Returns:
            A copy of the blob with the snapshot under SNAPSHOT_KEY
        """
        scope = self.accessor.resolve(scope)
        if window_state is None:
            window_state = self.host.serialize_window(scope) if scope is not None else {}
        state = dict(window_state)
        state[SNAPSHOT_KEY] = self.snapshot(scope).names
        logger.debug("Captured %d items from %s", len(state[SNAPSHOT_KEY]), scope)
        return state

    def restore(
        self,
        window_state: Optional[Dict[str, Any]],
        target_scope: Optional[ScopeId],
        focused_item: Any,
        ctx: CallContext,
    ) -> bool:
        """
        Apply a captured snapshot to a scope.

        Only takes effect when ctx.restore_enabled is set. Windows the host
        does not consider fully live additionally need ctx.restore_forced.
        Names without a live item are dropped.

        Returns:
            True if the scope's membership was rewritten
        """
        if not ctx.restore_enabled or ctx.clearing:
            return False
        snapshot = extract_snapshot(window_state)
        if snapshot is None:
            return False
        target_scope = self.accessor.resolve(target_scope)
        if target_scope is None:
            return False
        if not self.host.window_live(target_scope) and not ctx.restore_forced:
            logger.debug("Skipping restore into %s: window not live", target_scope)
            return False

        resolved = []
        for name in snapshot.names:
            item = self.host.lookup_by_name(name)
            if item is not None:
                resolved.append(item)
        head = [focused_item] if focused_item is not None else []

        self.accessor.set_active(target_scope, dedupe(head + resolved))
        self.accessor.set_buried(target_scope, head)
        logger.debug(
            "Restored %d of %d items into %s",
            len(resolved), len(snapshot.names), target_scope,
        )
        return True
