"""
Command-line interface for splex.
"""
