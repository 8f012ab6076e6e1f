"""Core functionality for twig"""

from typing import List, Optional, Union

from rich.console import Console
from rich.markup import escape

from twig.config import Config
from twig.constants import DEFAULT_DEVCONTAINER_IMAGE
from twig.exceptions import GitOperationError, UserAbortedError, WorktreeNotFoundError
from twig.models.worktree import WorktreeRecord
from twig.services.devcontainer_service import init_devcontainer
from twig.services.display_service import DisplayService
from twig.services.git import BranchQueries, GitOperations, WorktreeService
from twig.services.hook_service import HookInstallResult, install_prune_hook
from twig.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


class Twig:
    """Main class for managing Git worktrees."""

    def __init__(self, repo_path: str, config: Union[Config, dict, None] = None):
        """Initialize Twig.

        Args:
            repo_path: Directory twig works from (any directory inside the repository)
            config: Configuration dict or Config object
        """
        self.repo_path = str(repo_path)
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.verbose = self.config.verbose

        self.git_ops = GitOperations(self.repo_path)
        self.branch_queries = BranchQueries(self.git_ops, self.config.default_branch_candidates)
        self.worktree_service = WorktreeService(
            self.git_ops,
            self.branch_queries,
            copy_untracked=self.config.copy_untracked,
            bulk_copy_threshold=self.config.bulk_copy_threshold,
            workers=self.config.workers,
        )
        self.display_service = DisplayService(verbose=self.verbose)

    def _confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question unless prompts are disabled."""
        if self.config.assume_yes:
            return True
        choices = "[Y/n]" if default else "[y/N]"
        response = console.input(escape(f"{message} {choices} ")).strip().lower()
        if not response:
            return default
        return response in ("y", "yes")

    # ------------------------------------------------------------------
    # branch

    def branch(self, target: str, base: Optional[str] = None, directory: Optional[str] = None) -> str:
        """Open, reattach or create the worktree for target.

        1. target is a path or a branch with a worktree: return that directory.
        2. target is a branch without a worktree: attach a worktree to it.
        3. otherwise: create the branch from the base branch plus its worktree.

        Returns:
            Worktree directory
        """
        path = self.worktree_service.resolve_worktree_path(target)
        if path:
            logger.debug(f"Resolved {target} to existing worktree {path}")
        elif self.branch_queries.branch_exists(target):
            console.print(f"Creating worktree for existing branch: {target}")
            path = self.worktree_service.create_worktree_for_existing_branch(target, directory)
            console.print(f"[green]Created worktree at {path}[/green]")
        else:
            console.print(f"Worktree not found. Creating new worktree for branch: {target}")
            path = self.worktree_service.create_worktree(target, base=base, directory=directory)
            console.print(f"[green]Created worktree at {path}[/green]")

        if self.config.install_hook:
            self._ensure_prune_hook()
        return path

    def _ensure_prune_hook(self) -> None:
        try:
            result = self.install_prune_hook()
        except (OSError, GitOperationError) as e:
            logger.warning(f"Could not install post-checkout prune hook: {e}")
            return

        if result == HookInstallResult.INSTALLED:
            console.print("[dim]Installed post-checkout hook to automatically prune orphaned worktrees.[/dim]")
        elif result == HookInstallResult.UPDATED:
            console.print("[dim]Updated existing post-checkout hook to include twig prune.[/dim]")

    def install_prune_hook(self) -> HookInstallResult:
        return install_prune_hook(self.git_ops)

    # ------------------------------------------------------------------
    # list

    def list_worktrees(self, names_only: bool = False) -> List[WorktreeRecord]:
        """Show all worktrees."""
        worktrees = self.worktree_service.list_worktrees()
        if names_only:
            self.display_service.display_worktree_names(worktrees)
        else:
            self.display_service.display_worktree_table(worktrees, current_path=self.git_ops.repo_root())
        return worktrees

    # ------------------------------------------------------------------
    # delete

    def delete_worktree(self, target: str, keep_branch: bool = False) -> str:
        """Remove a worktree and, unless keep_branch is set, its branch.

        Returns:
            The removed worktree directory

        Raises:
            WorktreeNotFoundError: target matches no worktree
            UserAbortedError: the confirmation was declined
        """
        path = self.worktree_service.resolve_worktree_path(target)
        if not path:
            raise WorktreeNotFoundError(target)

        record = self.worktree_service.find_by_path(path)
        branch = record.branch if record else None

        message = f"Delete worktree {path}"
        if not keep_branch:
            message += f" and branch {branch or ''}"
        if not self._confirm(message + "?", default=False):
            raise UserAbortedError()

        self.worktree_service.remove_worktree(path, force=True)

        if not keep_branch and branch:
            # The branch may already be gone
            if self.branch_queries.branch_exists(branch):
                self.git_ops.branch_delete(branch, force=True)
            else:
                logger.debug(f"Branch {branch} no longer exists, nothing to delete")

        console.print(f"Removed worktree{'' if keep_branch else ' and branch'}.")
        return path

    # ------------------------------------------------------------------
    # prune

    def prune(self) -> int:
        """Remove worktrees whose branch no longer exists.

        A failure removing one worktree is reported and the rest are still
        processed.

        Returns:
            Number of worktrees removed
        """
        orphaned = self.worktree_service.find_orphaned_worktrees()
        if not orphaned:
            console.print("No orphaned worktrees found.")
            return 0

        self.display_service.display_orphans(orphaned)
        if not self._confirm(f"Remove {len(orphaned)} orphaned worktree(s)?", default=True):
            raise UserAbortedError()

        removed = 0
        for worktree in orphaned:
            try:
                self.worktree_service.remove_worktree(worktree.path, force=True)
                console.print(f"Removed: {worktree.path}")
                removed += 1
            except GitOperationError as e:
                console.print(f"[red]Failed to remove {worktree.path}: {e}[/red]")
        return removed

    # ------------------------------------------------------------------
    # init-devcontainer

    def init_devcontainer(
        self,
        image: str = DEFAULT_DEVCONTAINER_IMAGE,
        packages: str = "",
        ports: str = "",
        postcreate: str = "",
        mount_node_modules: bool = False,
    ) -> List[str]:
        """Scaffold .devcontainer/ at the repository root."""
        return init_devcontainer(
            self.git_ops.repo_root(),
            image=image,
            packages=packages,
            ports=ports,
            postcreate=postcreate,
            mount_node_modules=mount_node_modules,
        )
