"""
Codex release tools — install prebuilt release binaries, build tags locally.
"""

__version__ = "0.1.0"
