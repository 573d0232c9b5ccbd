"""
Tests for the in-memory host and workspace files.
"""

import json

import pytest

from scopebufs.core.exceptions import WorkspaceError
from scopebufs.core.settings import SNAPSHOT_KEY
from scopebufs.host.memory import MemoryHost
from scopebufs.scope.schemas import ScopeId


WORKSPACE = {
    "items": [
        {"name": "main.py", "file_path": "/src/main.py", "project": "p1"},
        {"name": "notes.org"},
        {"name": "old.txt", "live": False},
    ],
    "scopes": [
        {"container": "f1", "active": ["main.py"], "buried": ["notes.org"], "current_item": "main.py", "project": "p1"},
        {"container": "f1", "sub_index": 1, "pending_state": {SNAPSHOT_KEY: ["notes.org"]}},
    ],
    "current_scope": "f1:0",
}


class TestMemoryHost:
    """Test suite for MemoryHost."""

    def setup_method(self):
        self.host = MemoryHost()
        self.a = self.host.add_item("A")
        self.b = self.host.add_item("B")
        self.scope = self.host.add_scope(ScopeId(container="f1"), active=[self.a, self.b], current_item=self.a)

    def test_first_scope_becomes_current(self):
        assert self.host.current_scope() == self.scope
        assert self.host.selected_item() is self.a

    def test_lookup_by_name_only_finds_live_items(self):
        assert self.host.lookup_by_name("A") is self.a
        self.host.destroy_item(self.a)
        assert self.host.lookup_by_name("A") is None

    def test_destroy_scrubs_scopes(self):
        self.host.destroy_item(self.a)
        assert self.host.get_slot(self.scope, "active") == [self.b]
        assert self.host.current_item(self.scope) is self.b

    def test_display_moves_item_to_front(self):
        self.host.display(self.scope, self.b)
        assert self.host.get_slot(self.scope, "active") == [self.b, self.a]

    def test_unknown_slot(self):
        with pytest.raises(ValueError):
            self.host.get_slot(self.scope, "other")

    def test_unknown_scope(self):
        with pytest.raises(KeyError):
            self.host.get_slot(ScopeId(container="nope"), "active")


class TestWorkspaceFile:
    """Test suite for loading and saving workspace files."""

    def test_load(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text(json.dumps(WORKSPACE))
        host = MemoryHost.load(path)
        scope = ScopeId(container="f1")
        assert [i.name for i in host.all_items()] == ["main.py", "notes.org"]
        assert [i.name for i in host.get_slot(scope, "buried")] == ["notes.org"]
        assert host.current_project(scope) == "p1"
        assert host.file_path(host.lookup_by_name("main.py")) == "/src/main.py"
        assert len(host.pending_window_states()) == 1
        assert host.scopes() == [scope]

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text(json.dumps(WORKSPACE))
        MemoryHost.load(path).save(path)
        host = MemoryHost.load(path)
        assert host.current_scope() == ScopeId(container="f1")
        assert host.pending_window_states()[0].scope == ScopeId(container="f1", sub_index=1)

    def test_unknown_item_in_scope(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text(json.dumps({"items": [], "scopes": [{"container": "f1", "active": ["ghost"]}]}))
        with pytest.raises(WorkspaceError):
            MemoryHost.load(path)

    def test_duplicate_item_names(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text(json.dumps({"items": [{"name": "a"}, {"name": "a"}]}))
        with pytest.raises(WorkspaceError):
            MemoryHost.load(path)

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(WorkspaceError):
            MemoryHost.load(tmp_path / "missing.json")
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(WorkspaceError):
            MemoryHost.load(bad)
