"""Git command boundary for twig.

Everything twig asks of git goes through GitOperations. Each call opens a
fresh repository object from the explicit context directory, so nothing is
cached between calls and nothing depends on the process working directory.
"""

import os
from pathlib import Path
from typing import List

import git

from twig.exceptions import GitOperationError
from twig.utils.logging import get_logger

logger = get_logger(__name__)


def _describe_git_error(e: git.exc.GitCommandError) -> str:
    """Build a one-line message from a GitCommandError."""
    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else "").strip()
    status = e.status if hasattr(e, "status") else "unknown"

    # GitPython prefixes captured stderr with "stderr: '...'"
    if stderr.startswith("stderr: "):
        stderr = stderr[len("stderr: "):].strip("'").strip()

    if stderr:
        return f"{stderr} (exit {status})"
    return f"exit code {status}"


class GitOperations:
    """Thin wrapper around the git commands twig relies on."""

    def __init__(self, repo_path: str):
        """Initialize the service.

        Args:
            repo_path: Directory the commands run from (any directory inside the repository)
        """
        self.repo_path = str(repo_path)

    def _get_repo(self) -> git.Repo:
        """Open the repository containing repo_path.

        Creates a new repo instance for each call; GitPython repos are
        lightweight and we never want a stale view of the repository.
        """
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitOperationError(
                "open_repository", message=f"Not a git repository: {e}"
            ) from e

    def _run(self, operation: str, *args: str, branch: str = None) -> str:
        """Run a git command in the repository and return its stdout."""
        repo = self._get_repo()
        logger.debug(f"git {' '.join(args)}")
        try:
            return repo.git.execute(["git", *args])
        except git.exc.GitCommandError as e:
            raise GitOperationError(operation, branch, _describe_git_error(e)) from e

    def _absolute(self, output: str) -> str:
        """Resolve a path printed by git relative to the directory it ran in."""
        repo = self._get_repo()
        return str((Path(repo.working_dir) / output.strip()).resolve())

    # ------------------------------------------------------------------
    # Repository location

    def repo_root(self) -> str:
        """Top-level directory of the current worktree."""
        return self._absolute(self._run("repo_root", "rev-parse", "--show-toplevel"))

    def git_dir(self) -> str:
        """Git directory of the current worktree (``.git/worktrees/<name>`` in linked worktrees)."""
        return self._absolute(self._run("git_dir", "rev-parse", "--git-dir"))

    def git_common_dir(self) -> str:
        """Git directory shared by every worktree of the repository."""
        return self._absolute(self._run("git_common_dir", "rev-parse", "--git-common-dir"))

    def is_linked_worktree(self) -> bool:
        """True when running inside a linked (secondary) worktree."""
        return self.git_dir() != self.git_common_dir()

    def repo_name(self) -> str:
        """Name of the main repository, even when called from a linked worktree."""
        if not self.is_linked_worktree():
            return os.path.basename(self.repo_root())
        # The common dir is /path/to/main-repo/.git
        return os.path.basename(os.path.dirname(self.git_common_dir()))

    def git_path(self, name: str) -> str:
        """Resolve a path inside the git directory (honours core.hooksPath and worktrees)."""
        return self._absolute(self._run("git_path", "rev-parse", "--git-path", name))

    # ------------------------------------------------------------------
    # Refs and branches

    def show_ref(self, ref: str) -> bool:
        """Return True if the fully qualified ref can be verified.

        Any failure counts as "does not exist".
        """
        try:
            self._run("show_ref", "show-ref", "--verify", "--quiet", ref)
            return True
        except GitOperationError as e:
            logger.debug(f"Ref {ref} not found: {e}")
            return False

    def rev_parse(self, ref: str) -> str:
        """Resolve a ref to a commit SHA."""
        return self._run("rev_parse", "rev-parse", "--verify", f"{ref}^{{commit}}").strip()

    def local_branches(self) -> List[str]:
        """Short names of all local branches."""
        output = self._run("list_branches", "branch", "--format=%(refname:short)")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def branch_delete(self, branch: str, force: bool = False) -> None:
        """Delete a local branch (``-D`` when force is set)."""
        self._run("delete_branch", "branch", "-D" if force else "-d", branch, branch=branch)
        logger.info(f"Deleted branch {branch}")

    # ------------------------------------------------------------------
    # Remotes

    def remote_names(self) -> List[str]:
        """Names of the configured remotes."""
        return [remote.name for remote in self._get_repo().remotes]

    def fetch(self, remote: str) -> None:
        """Fetch from a remote."""
        self._run("fetch", "fetch", "--quiet", remote)

    # ------------------------------------------------------------------
    # Worktrees

    def worktree_list(self) -> str:
        """Raw `git worktree list --porcelain` output."""
        return self._run("list_worktrees", "worktree", "list", "--porcelain")

    def worktree_add(self, path: str, *args: str, branch: str = None) -> None:
        """Create a worktree at path.

        Args:
            path: Destination directory
            *args: Remaining ``git worktree add`` arguments (commit-ish or branch)
            branch: When given, create this new branch with ``-b``
        """
        command = ["worktree", "add"]
        if branch:
            command += ["-b", branch]
        command.append(str(path))
        command += list(args)
        self._run("add_worktree", *command, branch=branch or (args[0] if args else None))
        logger.info(f"Added worktree at {path}")

    def worktree_remove(self, path: str, force: bool = False) -> None:
        """Remove the worktree at path (``--force`` ignores local changes)."""
        command = ["worktree", "remove"]
        if force:
            command.append("--force")
        command.append(str(path))
        self._run("remove_worktree", *command)
        logger.info(f"Removed worktree at {path}")

    # ------------------------------------------------------------------
    # Working tree contents

    def untracked_files(self, cwd: str) -> List[str]:
        """Files present in cwd but not tracked by git (ignored files included).

        Paths are relative to cwd.
        """
        try:
            output = git.Git(str(cwd)).execute(["git", "ls-files", "--others", "-z"])
        except git.exc.GitCommandError as e:
            raise GitOperationError("list_untracked", message=_describe_git_error(e)) from e
        return [name for name in output.split("\0") if name]
