"""Worktree operations service for twig."""

import os
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console

from twig.exceptions import BranchExistsError, DirectoryExistsError
from twig.models.worktree import OrphanedWorktree, WorktreeRecord
from twig.services.git.branch_queries import BranchQueries
from twig.services.git.operations import GitOperations
from twig.services.untracked_copy import (
    DEFAULT_BULK_COPY_THRESHOLD,
    CopyResult,
    copy_untracked_files,
)
from twig.utils.logging import get_logger
from twig.validation import validate_branch_name

console = Console()
logger = get_logger(__name__)


def parse_worktree_output(output: str) -> List[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    A ``worktree`` line always starts a new record. Unknown lines (bare,
    detached, locked, prunable, ...) are ignored, and blank lines are just
    separators. Records keep the order git printed them in.
    """
    records: List[WorktreeRecord] = []
    current: Dict[str, str] = {}

    def flush():
        if current.get("path"):
            records.append(
                WorktreeRecord(
                    path=current["path"],
                    branch=current.get("branch") or None,
                    head=current.get("head"),
                )
            )

    for line in output.split("\n"):
        if not line.strip():
            continue

        if line.startswith("worktree "):
            flush()
            current = {"path": line[len("worktree "):].strip()}
        elif line.startswith("branch "):
            branch_ref = line[len("branch "):].strip()
            if branch_ref.startswith("refs/heads/"):
                branch_ref = branch_ref[len("refs/heads/"):]
            current["branch"] = branch_ref
        elif line.startswith("HEAD "):
            current["head"] = line[len("HEAD "):].strip()

    flush()
    return records


class WorktreeService:
    """Service for listing, resolving and creating git worktrees."""

    def __init__(
        self,
        git_ops: GitOperations,
        branch_queries: BranchQueries,
        copy_untracked: bool = True,
        bulk_copy_threshold: int = DEFAULT_BULK_COPY_THRESHOLD,
        workers: Optional[int] = None,
        show_progress: bool = True,
    ):
        """Initialize the worktree service.

        Args:
            git_ops: Git command boundary
            branch_queries: Ref existence checks and base branch handling
            copy_untracked: Copy untracked files into new worktrees
            bulk_copy_threshold: Group size at which directories are bulk copied
            workers: Copy worker override (None = auto-detect)
            show_progress: Show a progress bar while copying
        """
        self.git_ops = git_ops
        self.branch_queries = branch_queries
        self.copy_untracked = copy_untracked
        self.bulk_copy_threshold = bulk_copy_threshold
        self.workers = workers
        self.show_progress = show_progress

    # ------------------------------------------------------------------
    # Inventory

    def list_worktrees(self) -> List[WorktreeRecord]:
        """Read the current worktree inventory from git."""
        records = parse_worktree_output(self.git_ops.worktree_list())
        logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def find_by_path(self, path: str) -> Optional[WorktreeRecord]:
        """Return the inventory record registered at path, if any."""
        target = os.path.realpath(path)
        for record in self.list_worktrees():
            if os.path.realpath(record.path) == target:
                return record
        return None

    def resolve_worktree_path(self, target: str) -> Optional[str]:
        """Resolve a path or branch name to a worktree directory.

        An existing filesystem entry wins over a branch of the same name;
        the inventory is only read when the target is not a path.

        Returns:
            Absolute directory, or None if nothing matches
        """
        if not target:
            return None

        candidate = Path(self.git_ops.repo_path) / os.path.expanduser(target)
        try:
            if candidate.exists():
                return str(candidate.resolve())
        except OSError as e:
            # Name too long for the filesystem; treat it as a branch name
            logger.debug(f"Cannot stat {candidate}: {e}")

        for record in self.list_worktrees():
            if record.branch == target:
                return record.path
        return None

    def find_orphaned_worktrees(self) -> List[OrphanedWorktree]:
        """Find worktrees whose branch no longer exists.

        Detached worktrees have no branch and are never orphaned.
        """
        orphaned = []
        for record in self.list_worktrees():
            if not record.branch:
                continue
            if not self.branch_queries.branch_exists(record.branch):
                orphaned.append(OrphanedWorktree(path=record.path, branch=record.branch))
        return orphaned

    # ------------------------------------------------------------------
    # Creation

    def default_dir(self, branch: str) -> str:
        """Sibling directory of the main repository named ``<repo>-<branch>``."""
        root = self.git_ops.repo_root()
        return os.path.join(os.path.dirname(root), f"{self.git_ops.repo_name()}-{branch}")

    def _destination(self, branch: str, directory: Optional[str]) -> str:
        if directory:
            return str((Path(self.git_ops.repo_path) / os.path.expanduser(directory)).resolve())
        return self.default_dir(branch)

    def create_worktree(
        self, branch: str, base: Optional[str] = None, directory: Optional[str] = None
    ) -> str:
        """Create a new branch from the up-to-date base and a worktree for it.

        Args:
            branch: Name of the new branch
            base: Base branch (default: detected main/master)
            directory: Destination directory (default: ../<repo>-<branch>)

        Returns:
            Path of the new worktree

        Raises:
            ValidationError: invalid branch name
            PreconditionError: missing origin/base, existing branch or directory
            GitOperationError: fetch or worktree creation failed
        """
        validate_branch_name(branch)

        base = base or self.branch_queries.detect_default_branch()
        base_sha = self.branch_queries.ensure_base_up_to_date(base)

        # Untracked files come from the checkout twig was invoked in
        source_dir = self.git_ops.repo_root()
        dest_dir = self._destination(branch, directory)

        if self.branch_queries.branch_exists(branch):
            raise BranchExistsError(branch)
        if os.path.exists(dest_dir):
            raise DirectoryExistsError(dest_dir)

        self.git_ops.worktree_add(dest_dir, base_sha, branch=branch)
        logger.info(f"Created branch {branch} from {base} ({base_sha[:7]})")

        self._copy_untracked(source_dir, dest_dir)
        return dest_dir

    def create_worktree_for_existing_branch(
        self, branch: str, directory: Optional[str] = None
    ) -> str:
        """Attach a worktree to a branch that exists but has no worktree.

        Returns:
            Path of the new worktree
        """
        validate_branch_name(branch)

        source_dir = self.git_ops.repo_root()
        dest_dir = self._destination(branch, directory)

        if os.path.exists(dest_dir):
            raise DirectoryExistsError(dest_dir)

        self.git_ops.worktree_add(dest_dir, branch)

        self._copy_untracked(source_dir, dest_dir)
        return dest_dir

    def _copy_untracked(self, source_dir: str, dest_dir: str) -> Optional[CopyResult]:
        if not self.copy_untracked:
            return None
        result = copy_untracked_files(
            self.git_ops,
            source_dir,
            dest_dir,
            threshold=self.bulk_copy_threshold,
            workers=self.workers,
            show_progress=self.show_progress,
        )
        if result.copied:
            console.print(f"[dim]Copied {result.copied} untracked file(s) from {source_dir}[/dim]")
        if result.failed:
            console.print(f"[yellow]Warning: {result.failed} untracked file(s) could not be copied[/yellow]")
        return result

    # ------------------------------------------------------------------
    # Removal

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at path."""
        self.git_ops.worktree_remove(path, force=force)
