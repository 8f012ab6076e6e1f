"""Worktree data models."""

from dataclasses import dataclass
from typing import Optional

from twig.constants import DETACHED_LABEL


@dataclass(frozen=True)
class WorktreeRecord:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch: Optional[str] = None  # None = detached HEAD (or bare)
    head: Optional[str] = None

    @property
    def is_detached(self) -> bool:
        return not self.branch

    @property
    def short_head(self) -> str:
        return self.head[:7] if self.head else ""

    def __str__(self) -> str:
        return f"{self.branch or DETACHED_LABEL} @ {self.path}"


@dataclass(frozen=True)
class OrphanedWorktree:
    """A worktree whose branch no longer exists."""

    path: str
    branch: str

    def __str__(self) -> str:
        return f"{self.path} (branch: {self.branch})"
