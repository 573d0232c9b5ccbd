"""
Host collaborator contract and the in-memory reference host.
"""
