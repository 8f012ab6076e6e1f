"""Data models for twig."""

from .worktree import WorktreeRecord, OrphanedWorktree

__all__ = ["WorktreeRecord", "OrphanedWorktree"]
