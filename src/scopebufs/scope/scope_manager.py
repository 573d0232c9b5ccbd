"""
Scope Manager.

Wires the membership engine to a host: builds the compiled filters, the
accessor, set algebra, snapshot codec and operations, and subscribes the
engine's handlers to the host's lifecycle events.
"""

import logging
from typing import Any, Dict, Optional

from scopebufs.core.config import Settings
from scopebufs.events import (
    CallContext, EventRegistry, ScopeEvent, call_context, clearing
)
from scopebufs.filters.matcher import FilterSet
from scopebufs.host.base import Host
from scopebufs.scope.accessor import ScopeAccessor
from scopebufs.scope.algebra import ScopeAlgebra
from scopebufs.scope.applier import apply_include_exclude
from scopebufs.scope.operations import ScopeOperations
from scopebufs.scope.schemas import (
    ScopeAboutToSwitch, ScopeCreated, ScopeDuplicated, ScopeId,
    WindowStateCaptured, WindowStateRestored
)
from scopebufs.scope.snapshot import SnapshotCodec

logger = logging.getLogger(__name__)


class ScopeManager:
    """
    Entry point for hosts.

    A host creates one manager, calls install() and then publishes its
    lifecycle events on manager.events.
    """

    def __init__(self, host: Host, settings: Optional[Settings] = None):
        self.host = host
        self.events = EventRegistry()
        self._installed = False
        self.reconfigure(settings or Settings())

    def reconfigure(self, settings: Settings) -> None:
        """Recompile the filters and rebuild the engine for new settings."""
        self.settings = settings
        self.filters = FilterSet.from_settings(settings)
        self.accessor = ScopeAccessor(self.host, self.filters, settings)
        self.algebra = ScopeAlgebra(self.accessor)
        self.codec = SnapshotCodec(self.accessor)
        self.operations = ScopeOperations(self.accessor, self.algebra, settings)
        logger.debug("Configured scope manager")

    def install(self) -> "ScopeManager":
        if self._installed:
            return self
        self.events.subscribe(ScopeEvent.SCOPE_CREATED, self._on_scope_created)
        self.events.subscribe(ScopeEvent.SCOPE_DUPLICATED, self._on_scope_duplicated)
        self.events.subscribe(ScopeEvent.SCOPE_ABOUT_TO_SWITCH, self._on_about_to_switch)
        self.events.subscribe(ScopeEvent.WINDOW_STATE_CAPTURED, self._on_state_captured)
        self.events.subscribe(ScopeEvent.WINDOW_STATE_RESTORED, self._on_state_restored)
        self._installed = True
        return self

    def uninstall(self) -> None:
        if not self._installed:
            return
        self.events.unsubscribe(ScopeEvent.SCOPE_CREATED, self._on_scope_created)
        self.events.unsubscribe(ScopeEvent.SCOPE_DUPLICATED, self._on_scope_duplicated)
        self.events.unsubscribe(ScopeEvent.SCOPE_ABOUT_TO_SWITCH, self._on_about_to_switch)
        self.events.unsubscribe(ScopeEvent.WINDOW_STATE_CAPTURED, self._on_state_captured)
        self.events.unsubscribe(ScopeEvent.WINDOW_STATE_RESTORED, self._on_state_restored)
        self._installed = False

    # Event handlers

    def _on_scope_created(self, payload: ScopeCreated, ctx: CallContext):
        return apply_include_exclude(self.accessor, payload.scope)

    def _on_scope_duplicated(self, payload: ScopeDuplicated, ctx: CallContext):
        logger.debug("Scope %s duplicated from %s, keeping inherited items", payload.scope, payload.parent)
        return None

    def _on_about_to_switch(self, payload: ScopeAboutToSwitch, ctx: CallContext) -> bool:
        # A fresh sub-scope starts out with the lists of the one it was
        # opened from; reset it to its own current item.
        if not payload.target_is_fresh or ctx.clearing or ctx.restore_enabled:
            return False
        if payload.target not in self.host.scopes():
            return False
        with clearing(ctx):
            self.operations.clear(payload.target)
        return True

    def _on_state_captured(self, payload: WindowStateCaptured, ctx: CallContext) -> Dict[str, Any]:
        return self.codec.capture(payload.scope, payload.window_state)

    def _on_state_restored(self, payload: WindowStateRestored, ctx: CallContext) -> bool:
        return self.codec.restore(payload.window_state, payload.scope, payload.focused_item, ctx)

    # Convenience entry points for hosts

    def scope_created(self, scope: ScopeId, duplicated_from: Optional[ScopeId] = None) -> None:
        """Publish creation of a scope, fresh or duplicated."""
        with call_context() as ctx:
            if duplicated_from is not None:
                self.events.publish(
                    ScopeEvent.SCOPE_DUPLICATED,
                    ScopeDuplicated(scope=scope, parent=duplicated_from),
                    ctx,
                )
            else:
                self.events.publish(ScopeEvent.SCOPE_CREATED, ScopeCreated(scope=scope), ctx)

    def about_to_switch(self, scope: ScopeId, target: ScopeId, target_is_fresh: bool = False) -> bool:
        """Publish a switch from scope to target; True if target was cleared."""
        with call_context() as ctx:
            results = self.events.publish(
                ScopeEvent.SCOPE_ABOUT_TO_SWITCH,
                ScopeAboutToSwitch(scope=scope, target=target, target_is_fresh=target_is_fresh),
                ctx,
            )
        return any(r is True for r in results)

    def capture_window(self, scope: Optional[ScopeId] = None) -> Dict[str, Any]:
        """Serialize a scope's window state with its membership embedded."""
        scope = self.accessor.resolve(scope)
        if scope is None:
            return {}
        window_state = self.host.serialize_window(scope)
        with call_context() as ctx:
            results = self.events.publish(
                ScopeEvent.WINDOW_STATE_CAPTURED,
                WindowStateCaptured(scope=scope, window_state=window_state),
                ctx,
            )
        states = [r for r in results if isinstance(r, dict)]
        return states[-1] if states else window_state

    def restore_window(
        self,
        window_state: Dict[str, Any],
        scope: Optional[ScopeId] = None,
        focused_item: Any = None,
        force: bool = False,
    ) -> bool:
        """
        Apply a captured window state to a scope.

        Args:
            window_state: A blob produced by capture_window
            scope: The target scope, None for the current one
            focused_item: Item forced to the front; the scope's current item if None
            force: Also restore into windows that are not fully live

        Returns:
            True if some handler rewrote the scope's membership
        """
        scope = self.accessor.resolve(scope)
        if focused_item is None and scope is not None:
            focused_item = self.host.current_item(scope)
        with call_context(restore=True, force=force) as ctx:
            results = self.events.publish(
                ScopeEvent.WINDOW_STATE_RESTORED,
                WindowStateRestored(scope=scope, window_state=window_state, focused_item=focused_item),
                ctx,
            )
        return any(r is True for r in results)
