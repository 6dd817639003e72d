"""State/store layer.

This package is the single source of truth for how partial updates from the
voice runtime and the web frontend are reconciled into one hub state per
visitor: identity resolution, merging, the voice history log and the
profile registry.
"""
