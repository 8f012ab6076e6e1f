"""Shell completion for twig.

Completion itself is handled by argcomplete; this module provides the
dynamic completers and installs or removes the activation line in the
user's shell init file.
"""

import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from twig.constants import COMPLETION_BEGIN_MARKER, COMPLETION_END_MARKER, PROGRAM_NAME
from twig.exceptions import TwigError
from twig.services.git import BranchQueries, GitOperations, WorktreeService
from twig.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)

COMPLETION_BLOCK = (
    f"{COMPLETION_BEGIN_MARKER}\n"
    f'eval "$(register-python-argcomplete {PROGRAM_NAME})"\n'
    f"{COMPLETION_END_MARKER}\n"
)


# ---------------------------------------------------------------------------
# Completers (run inside the shell's completion hook; must never raise)


def branch_completer(prefix: str, **kwargs) -> List[str]:
    """Complete local branch names."""
    try:
        branches = BranchQueries(GitOperations(os.getcwd())).local_branches()
    except TwigError as e:
        logger.debug(f"Branch completion unavailable: {e}")
        return []
    return [branch for branch in branches if branch.startswith(prefix)]


def worktree_branch_completer(prefix: str, **kwargs) -> List[str]:
    """Complete branches that have a worktree (what `twig list` shows)."""
    try:
        git_ops = GitOperations(os.getcwd())
        worktrees = WorktreeService(git_ops, BranchQueries(git_ops)).list_worktrees()
    except TwigError as e:
        logger.debug(f"Worktree completion unavailable: {e}")
        return []
    return [wt.branch for wt in worktrees if wt.branch and wt.branch.startswith(prefix)]


# ---------------------------------------------------------------------------
# Shell init file


def get_shell_init_file(shell: Optional[str] = None) -> Path:
    """~/.zshrc for zsh, ~/.bashrc otherwise."""
    shell = shell if shell is not None else os.environ.get("SHELL", "")
    if "zsh" in shell:
        return Path.home() / ".zshrc"
    return Path.home() / ".bashrc"


def is_completion_installed(init_file: Optional[Path] = None) -> bool:
    init_file = init_file or get_shell_init_file()
    try:
        return COMPLETION_BEGIN_MARKER in init_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return False


def setup_completion(init_file: Optional[Path] = None) -> bool:
    """Append the argcomplete activation block to the shell init file.

    Returns:
        False if it was already installed
    """
    init_file = init_file or get_shell_init_file()
    if is_completion_installed(init_file):
        console.print("\n[green]✓[/green] Shell completion is already installed!\n")
        console.print(f"To remove and reinstall, run: {PROGRAM_NAME} completion --cleanup\n")
        return False

    existing = init_file.read_text(encoding="utf-8") if init_file.exists() else ""
    separator = "" if not existing or existing.endswith("\n") else "\n"
    with open(init_file, "a", encoding="utf-8") as f:
        f.write(f"{separator}\n{COMPLETION_BLOCK}")

    console.print("\n[green]✓[/green] Shell completion installed successfully!\n")
    console.print("To activate it in your current terminal, run:\n")
    console.print(f"  source {init_file}\n")
    console.print("Or simply restart your terminal.\n")
    return True


def cleanup_completion(init_file: Optional[Path] = None) -> bool:
    """Remove the activation block from the shell init file.

    Returns:
        False if there was nothing to remove
    """
    init_file = init_file or get_shell_init_file()
    if not is_completion_installed(init_file):
        console.print("Shell completion is not installed.")
        return False

    lines = init_file.read_text(encoding="utf-8").splitlines(keepends=True)
    kept = []
    inside = False
    for line in lines:
        if line.strip() == COMPLETION_BEGIN_MARKER:
            inside = True
            # Drop the blank line setup_completion put in front of the block
            if kept and not kept[-1].strip():
                kept.pop()
            continue
        if inside:
            if line.strip() == COMPLETION_END_MARKER:
                inside = False
            continue
        kept.append(line)

    init_file.write_text("".join(kept), encoding="utf-8")
    console.print("\n[green]✓[/green] Shell completion removed!\n")
    console.print("Restart your terminal to complete the removal.\n")
    return True
