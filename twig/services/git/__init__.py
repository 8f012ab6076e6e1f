"""Git-related services for twig."""

from .operations import GitOperations
from .branch_queries import BranchQueries
from .worktrees import WorktreeService, parse_worktree_output

__all__ = [
    "GitOperations",
    "BranchQueries",
    "WorktreeService",
    "parse_worktree_output",
]
