"""Structural edits: attach, substitute, fuse, concat."""

from smilax.transform.edit import attach, substitute
from smilax.transform.combine import concat, fuse

__all__ = [
    "attach",
    "substitute",
    "fuse",
    "concat",
]
