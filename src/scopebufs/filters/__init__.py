"""
Name filters for the scope membership engine.
"""
