"""Display and formatting service for worktree information"""
import os
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from twig.constants import DETACHED_LABEL
from twig.models.worktree import OrphanedWorktree, WorktreeRecord
from twig.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


class DisplayService:
    """Renders twig output to the terminal."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def display_worktree_names(self, worktrees: List[WorktreeRecord]) -> None:
        """One branch name per line, for scripts."""
        for worktree in worktrees:
            console.print(
                worktree.branch or DETACHED_LABEL, markup=False, highlight=False, soft_wrap=True
            )

    def display_worktree_table(
        self, worktrees: List[WorktreeRecord], current_path: Optional[str] = None
    ) -> None:
        """Display a table of worktrees, marking the one we're in."""
        table = Table()
        table.add_column("Branch")
        table.add_column("Path")
        table.add_column("HEAD")

        current = os.path.realpath(current_path) if current_path else None
        for worktree in worktrees:
            is_current = current is not None and os.path.realpath(worktree.path) == current
            branch = worktree.branch or DETACHED_LABEL
            table.add_row(
                f"{branch} *" if is_current else branch,
                worktree.path,
                worktree.short_head,
                style="yellow" if worktree.is_detached else ("green" if is_current else None),
            )

        console.print(table)
        if self.verbose:
            console.print(f"\n{len(worktrees)} worktree(s)")

    def display_orphans(self, orphaned: List[OrphanedWorktree]) -> None:
        console.print(f"Found {len(orphaned)} orphaned worktree(s):")
        for worktree in orphaned:
            console.print(f"  {worktree}", markup=False)
