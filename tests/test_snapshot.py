"""
Tests for the Snapshot Codec and window-state events.
"""

from scopebufs.core.config import Settings
from scopebufs.core.settings import SNAPSHOT_KEY
from scopebufs.events import CallContext, call_context
from scopebufs.host.memory import MemoryHost
from scopebufs.scope.scope_manager import ScopeManager
from scopebufs.scope.schemas import ScopeId
from scopebufs.scope.snapshot import extract_snapshot


class TestSnapshotCodec:
    """Test suite for capture and restore of scope membership."""

    def setup_method(self):
        self.host = MemoryHost()
        self.a = self.host.add_item("A")
        self.b = self.host.add_item("B")
        self.c = self.host.add_item("C")
        self.focus = self.host.add_item("F")
        self.source = ScopeId(container="f1")
        self.target = ScopeId(container="f2")
        self.host.add_scope(self.source, active=[self.a, self.b], buried=[self.c, self.a], current_item=self.a)
        self.host.add_scope(self.target, current_item=self.focus)
        self.manager = ScopeManager(self.host, Settings(hidden_patterns=[], include_buried=False)).install()
        self.codec = self.manager.codec

    def test_capture_records_raw_names(self):
        state = self.codec.capture(self.source)
        assert state[SNAPSHOT_KEY] == ["A", "B", "C"]

    def test_capture_skips_dead_items(self):
        self.b.live = False
        assert self.codec.capture(self.source)[SNAPSHOT_KEY] == ["A", "C"]

    def test_capture_passes_blob_through(self):
        blob = {"layout": {"split": "horizontal"}, "point": 42}
        state = self.codec.capture(self.source, blob)
        assert state["layout"] == {"split": "horizontal"}
        assert state["point"] == 42
        assert SNAPSHOT_KEY not in blob

    def test_capture_uses_host_serialization(self):
        state = self.codec.capture(self.source)
        assert state["scope"] == "f1:0"

    def test_round_trip(self):
        state = self.codec.capture(self.source)
        with call_context(restore=True) as ctx:
            assert self.codec.restore(state, self.target, self.focus, ctx)
        assert self.host.get_slot(self.target, "active") == [self.focus, self.a, self.b, self.c]
        assert self.host.get_slot(self.target, "buried") == [self.focus]

    def test_restore_collapses_buried(self):
        state = self.codec.capture(self.source)
        with call_context(restore=True) as ctx:
            self.codec.restore(state, self.target, self.focus, ctx)
        assert self.c in self.host.get_slot(self.target, "active")
        assert self.c not in self.host.get_slot(self.target, "buried")

    def test_focused_item_not_duplicated(self):
        state = self.codec.capture(self.source)
        with call_context(restore=True) as ctx:
            self.codec.restore(state, self.target, self.b, ctx)
        assert self.host.get_slot(self.target, "active") == [self.b, self.a, self.c]

    def test_unresolvable_names_are_dropped(self):
        state = self.codec.capture(self.source)
        self.host.destroy_item(self.b)
        with call_context(restore=True) as ctx:
            assert self.codec.restore(state, self.target, self.focus, ctx)
        assert self.host.get_slot(self.target, "active") == [self.focus, self.a, self.c]

    def test_restore_requires_enabled_context(self):
        state = self.codec.capture(self.source)
        assert not self.codec.restore(state, self.target, self.focus, CallContext())
        assert self.host.get_slot(self.target, "active") == []

    def test_restore_into_window_not_live_requires_force(self):
        self.host.set_window_live(self.target, False)
        state = self.codec.capture(self.source)
        with call_context(restore=True) as ctx:
            assert not self.codec.restore(state, self.target, self.focus, ctx)
        with call_context(force=True) as ctx:
            assert self.codec.restore(state, self.target, self.focus, ctx)
        assert self.host.get_slot(self.target, "active")[0] is self.focus

    def test_restore_without_snapshot_is_noop(self):
        with call_context(restore=True) as ctx:
            assert not self.codec.restore({"point": 1}, self.target, self.focus, ctx)

    def test_extract_snapshot(self):
        assert extract_snapshot(None) is None
        assert extract_snapshot({SNAPSHOT_KEY: "not a list"}) is None
        assert extract_snapshot({SNAPSHOT_KEY: ["A", 3, "B"]}).names == ["A", "B"]


class TestWindowStateEvents:
    """Test suite for capture/restore through the manager's events."""

    def setup_method(self):
        self.host = MemoryHost()
        self.a = self.host.add_item("A")
        self.b = self.host.add_item("B")
        self.f = self.host.add_item("F")
        self.source = ScopeId(container="f1")
        self.clone = ScopeId(container="f1", sub_index=1)
        self.host.add_scope(self.source, active=[self.a, self.b], current_item=self.a)
        self.manager = ScopeManager(self.host, Settings(hidden_patterns=[])).install()

    def test_capture_and_restore_window(self):
        state = self.manager.capture_window(self.source)
        self.host.add_scope(self.clone, current_item=self.f)
        assert self.manager.restore_window(state, self.clone)
        assert self.host.get_slot(self.clone, "active") == [self.f, self.a, self.b]

    def test_restore_after_uninstall_does_nothing(self):
        state = self.manager.capture_window(self.source)
        self.host.add_scope(self.clone, current_item=self.f)
        self.manager.uninstall()
        assert not self.manager.restore_window(state, self.clone)

    def test_pending_scope_activation(self):
        state = self.manager.capture_window(self.source)
        self.host.add_pending_scope(self.clone, state)
        self.host.display(self.source, self.f)
        self.host.set_slot(self.source, "active", [self.f])
        assert self.manager.algebra.captured(excluding=self.source) == {self.a, self.b}

        restored_state = self.host.activate_pending(self.clone)
        assert self.manager.restore_window(restored_state, self.clone, focused_item=self.b)
        assert self.host.get_slot(self.clone, "active") == [self.b, self.a]

    def test_capture_without_current_scope(self):
        manager = ScopeManager(MemoryHost(), Settings(hidden_patterns=[])).install()
        assert manager.capture_window() == {}
