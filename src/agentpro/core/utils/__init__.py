"""Shared utilities (I/O, paths, merging) for Agent Pro core."""
