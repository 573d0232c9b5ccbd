"""
Scope-local buffer membership.

This package tracks, per scope, which items are active and which are buried,
applies filter policy when scopes are created, computes cross-scope set
algebra and moves scope membership through window-state snapshots.
"""
