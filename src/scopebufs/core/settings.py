"""
Project-wide constants that are unlikely to change at runtime.
"""

# Reserved key under which the buffer list is stored in a window-state blob.
SNAPSHOT_KEY = "scopebufs-buffer-list"

# Regex that can never match (end of string followed by any character).
NEVER_MATCH_PATTERN = r"\Z[\s\S]"

ACTIVE_SLOT = "active"
BURIED_SLOT = "buried"
