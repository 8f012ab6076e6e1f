"""Branch and ref queries for twig."""

from typing import List, Optional

from twig.constants import REMOTE_NAME
from twig.exceptions import (
    BaseBranchNotFoundError,
    DefaultBranchNotFoundError,
    GitOperationError,
    NoOriginRemoteError,
)
from twig.services.git.operations import GitOperations
from twig.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BRANCH_CANDIDATES = ["main", "master"]


class BranchQueries:
    """Answers existence questions about refs and prepares base branches."""

    def __init__(self, git_ops: GitOperations, candidates: Optional[List[str]] = None):
        """Initialize branch queries.

        Args:
            git_ops: Git command boundary
            candidates: Default branch names to try, in priority order
        """
        self.git_ops = git_ops
        self.candidates = candidates or list(DEFAULT_BRANCH_CANDIDATES)
        self.remote_name = REMOTE_NAME

    def ref_exists(self, ref: str) -> bool:
        """Check if a fully qualified ref (e.g. ``refs/heads/main``) exists."""
        return self.git_ops.show_ref(ref)

    def branch_exists(self, branch: str) -> bool:
        """Check if a local branch exists."""
        return self.ref_exists(f"refs/heads/{branch}")

    def remote_branch_exists(self, branch: str) -> bool:
        """Check if the remote-tracking branch exists on origin."""
        return self.ref_exists(f"refs/remotes/{self.remote_name}/{branch}")

    def local_branches(self) -> List[str]:
        """Short names of all local branches."""
        return self.git_ops.local_branches()

    def detect_default_branch(self) -> str:
        """Find the default branch.

        Each candidate is checked locally first, then on origin, so local
        ``main`` wins over ``origin/main`` which wins over local ``master``.

        Raises:
            DefaultBranchNotFoundError: if no candidate exists anywhere
        """
        for branch in self.candidates:
            if self.branch_exists(branch):
                logger.debug(f"Default branch: {branch} (local)")
                return branch
            if self.remote_branch_exists(branch):
                logger.debug(f"Default branch: {branch} ({self.remote_name})")
                return branch

        raise DefaultBranchNotFoundError(self.candidates)

    def ensure_base_up_to_date(self, base: str) -> str:
        """Fetch origin and return the commit SHA of ``origin/<base>``.

        A SHA is returned instead of the remote ref so that the branch created
        from it does not track the remote branch as its upstream.

        Raises:
            NoOriginRemoteError: if there is no 'origin' remote
            GitOperationError: if fetching fails
            BaseBranchNotFoundError: if origin has no such branch after fetching
        """
        if self.remote_name not in self.git_ops.remote_names():
            raise NoOriginRemoteError()

        try:
            self.git_ops.fetch(self.remote_name)
        except GitOperationError as e:
            raise GitOperationError(
                "fetch", message=f"Failed to fetch from {self.remote_name}: {e.message}"
            ) from e

        if not self.remote_branch_exists(base):
            raise BaseBranchNotFoundError(base)

        sha = self.git_ops.rev_parse(f"refs/remotes/{self.remote_name}/{base}")
        logger.info(f"Base {self.remote_name}/{base} is at {sha}")
        return sha
