"""
Initialize the CLI package. Contains the typer applications.
"""
