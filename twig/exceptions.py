"""Custom exceptions for twig"""

from typing import Optional


class TwigError(Exception):
    """Base exception for all twig errors."""
    pass


class ValidationError(TwigError):
    """Raised when user input is rejected before any git call is made."""
    pass


class PreconditionError(TwigError):
    """Raised when repository state forbids an operation before anything is changed."""
    pass


class NoOriginRemoteError(PreconditionError):
    """Raised when the repository has no remote named 'origin'."""

    def __init__(self):
        super().__init__(
            "No 'origin' remote found. Please add a remote named 'origin' "
            "or manually fetch and create the base branch."
        )


class DefaultBranchNotFoundError(PreconditionError):
    """Raised when none of the default branch candidates exists."""

    def __init__(self, candidates: Optional[list] = None):
        self.candidates = candidates or ["main", "master"]
        names = " nor ".join(f"'{name}'" for name in self.candidates)
        super().__init__(
            f"Could not detect default branch. Neither {names} exists locally or on origin. "
            "Please specify a base branch with --base."
        )


class BaseBranchNotFoundError(PreconditionError):
    """Raised when the base branch is missing on origin after fetching."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"Branch '{branch}' does not exist on origin. Please specify a valid base branch."
        )


class BranchExistsError(PreconditionError):
    """Raised when a new branch would collide with an existing one."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' already exists.")


class DirectoryExistsError(PreconditionError):
    """Raised when the worktree destination directory is already present."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Directory already exists: {path}. Choose a different directory with --dir"
        )


class GitOperationError(TwigError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class DevcontainerError(TwigError):
    """Exception raised when the Dev Container CLI fails."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Dev Container failed to start: {message}")


class WorktreeNotFoundError(TwigError):
    """Exception raised when a branch or path does not resolve to a worktree."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(
            f"No worktree found for '{target}'. Use 'twig list' to see available worktrees."
        )


class UserAbortedError(TwigError):
    """Exception raised when the user declines a confirmation prompt."""

    def __init__(self):
        super().__init__("Aborted.")
