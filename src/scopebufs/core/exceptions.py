class ScopeBufsError(Exception):
    """Base exception for all scopebufs errors"""
    pass

class ConfigError(ScopeBufsError):
    """Invalid filter pattern or inconsistent configuration"""
    pass

class WorkspaceError(ScopeBufsError):
    """
    Workspace file cannot be read or does not describe a valid host state
    (unknown item names in a scope, duplicate live names, etc.)
    """
    pass

class SnapshotNotFoundError(ScopeBufsError):
    """No persisted window state with the requested name"""
    pass
