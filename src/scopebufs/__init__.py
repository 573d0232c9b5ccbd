"""
scopebufs: scope-local views of a host's global buffer list.
"""

__version__ = "0.1.0"
