"""
Shared utilities for splex.
"""
