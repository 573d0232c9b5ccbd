"""
Lifecycle events published by the host and the per-call context threaded
through their handlers.

The host publishes events at its own call sites; the membership engine
subscribes callbacks here and never wraps host functions.
"""

import contextlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ScopeEvent(str, Enum):
    """Host lifecycle events the engine reacts to."""
    SCOPE_CREATED = "scope-created"
    SCOPE_DUPLICATED = "scope-duplicated"
    SCOPE_ABOUT_TO_SWITCH = "scope-about-to-switch"
    WINDOW_STATE_CAPTURED = "window-state-captured"
    WINDOW_STATE_RESTORED = "window-state-restored"


@dataclass
class CallContext:
    """
    Flags that live for a single top-level host call.

    restore_enabled: window-state restores may rewrite scope membership
    restore_forced: restores may also target windows that are not fully live
    clearing: the switch clearing step is running
    """
    restore_enabled: bool = False
    restore_forced: bool = False
    clearing: bool = False


@contextlib.contextmanager
def call_context(restore: bool = False, force: bool = False) -> Iterator[CallContext]:
    """
    Use as:
        with call_context(restore=True) as ctx:
            manager.events.publish(ScopeEvent.WINDOW_STATE_RESTORED, payload, ctx)

    The flags are reset on every exit path, so nothing outlives the call.
    """
    ctx = CallContext(restore_enabled=restore or force, restore_forced=force)
    try:
        yield ctx
    finally:
        ctx.restore_enabled = False
        ctx.restore_forced = False
        ctx.clearing = False


@contextlib.contextmanager
def clearing(ctx: CallContext) -> Iterator[CallContext]:
    """Mark ctx as running the clearing step for the duration of the block."""
    previous = ctx.clearing
    ctx.clearing = True
    try:
        yield ctx
    finally:
        ctx.clearing = previous


Handler = Callable[[BaseModel, CallContext], Any]


class EventRegistry:
    """Typed callback registry; handlers run synchronously in subscription order."""

    def __init__(self):
        self._handlers: Dict[ScopeEvent, List[Handler]] = {event: [] for event in ScopeEvent}

    def subscribe(self, event: ScopeEvent, handler: Handler) -> Handler:
        self._handlers[ScopeEvent(event)].append(handler)
        return handler

    def unsubscribe(self, event: ScopeEvent, handler: Handler) -> bool:
        handlers = self._handlers[ScopeEvent(event)]
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def handlers(self, event: ScopeEvent) -> List[Handler]:
        return list(self._handlers[ScopeEvent(event)])

    def publish(self, event: ScopeEvent, payload: BaseModel, ctx: Optional[CallContext] = None) -> List[Any]:
        """
        Dispatch an event to every subscribed handler.

        Args:
            event: The event being published
            payload: The event's payload model
            ctx: Context of the current top-level call; a fresh one if None

        Returns:
            The handlers' return values, in subscription order
        """
        if ctx is None:
            ctx = CallContext()
        handlers = self.handlers(event)
        logger.debug("Publishing %s to %d handlers", event.value, len(handlers))
        return [handler(payload, ctx) for handler in handlers]
