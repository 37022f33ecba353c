"""
Shared utilities: checked arithmetic, configuration and logging setup.
"""
