"""
Tests for the Scope Membership Accessor.
"""

from scopebufs.core.config import Settings
from scopebufs.filters.matcher import FilterSet
from scopebufs.host.memory import MemoryHost
from scopebufs.scope.accessor import ScopeAccessor, dedupe
from scopebufs.scope.schemas import ScopeId


class TestScopeAccessor:
    """Test suite for reading and writing scope membership."""

    def setup_method(self):
        self.host = MemoryHost()
        self.a = self.host.add_item("a.py")
        self.b = self.host.add_item("b.py")
        self.c = self.host.add_item("c.py")
        self.d = self.host.add_item("d.py")
        self.scope = ScopeId(container="f1", sub_index=0)
        self.host.add_scope(self.scope, active=[self.a, self.b], buried=[self.c], current_item=self.a)
        self.settings = Settings(hidden_patterns=[r"^b\.py$"], include_buried=True)
        self.accessor = ScopeAccessor(self.host, FilterSet.from_settings(self.settings), self.settings)

    def test_hidden_items_are_dropped(self):
        result = self.accessor.compute_list(self.scope, include_buried=True, include_hidden=False)
        assert result == [self.a, self.c]

    def test_hidden_items_kept_on_request(self):
        result = self.accessor.compute_list(self.scope, include_buried=True, include_hidden=True)
        assert result == [self.a, self.b, self.c]

    def test_buried_items_left_out(self):
        result = self.accessor.compute_list(self.scope, include_buried=False, include_hidden=True)
        assert result == [self.a, self.b]

    def test_buried_toggle_default_comes_from_settings(self):
        settings = Settings(hidden_patterns=[], include_buried=False)
        accessor = ScopeAccessor(self.host, FilterSet.from_settings(settings), settings)
        assert accessor.compute_list(self.scope) == [self.a, self.b]

    def test_current_scope_is_default(self):
        assert self.accessor.compute_list(include_hidden=True) == [self.a, self.b, self.c]

    def test_no_duplicates(self):
        self.host.set_slot(self.scope, "active", [self.a, self.b, self.a])
        self.host.set_slot(self.scope, "buried", [self.b, self.c, self.c])
        for include_buried in (True, False):
            for include_hidden in (True, False):
                result = self.accessor.compute_list(self.scope, include_buried, include_hidden)
                assert len(result) == len(set(result))
        assert self.accessor.compute_list(self.scope, True, True) == [self.a, self.b, self.c]

    def test_dead_items_are_dropped(self):
        self.c.live = False
        assert self.accessor.compute_list(self.scope, True, True) == [self.a, self.b]
        # Raw getters are unfiltered
        assert self.accessor.get_buried(self.scope) == [self.c]

    def test_set_active_and_buried_replace(self):
        self.accessor.set_active(self.scope, [self.d, self.a, self.d])
        self.accessor.set_buried(self.scope, [])
        assert self.accessor.get_active(self.scope) == [self.d, self.a]
        assert self.accessor.get_buried(self.scope) == []

    def test_remove_item_from_both_sequences(self):
        self.host.set_slot(self.scope, "buried", [self.c, self.b])
        assert self.accessor.remove_item(self.scope, self.b)
        assert self.accessor.get_active(self.scope) == [self.a]
        assert self.accessor.get_buried(self.scope) == [self.c]

    def test_remove_absent_item_is_noop(self):
        assert not self.accessor.remove_item(self.scope, self.d)
        assert self.accessor.get_active(self.scope) == [self.a, self.b]

    def test_raw_ignores_toggle_and_hidden(self):
        settings = Settings(hidden_patterns=[".*"], include_buried=False)
        accessor = ScopeAccessor(self.host, FilterSet.from_settings(settings), settings)
        assert accessor.raw(self.scope) == [self.a, self.b, self.c]

    def test_is_local_and_non_local(self):
        assert self.accessor.is_local(self.b, self.scope)
        assert not self.accessor.is_local(self.d, self.scope)
        assert self.accessor.non_local(self.scope) == [self.d]


def test_dedupe_keeps_first_occurrence():
    assert dedupe([3, 1, 3, 2, 1]) == [3, 1, 2]
