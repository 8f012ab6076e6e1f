"""Installation of the post-checkout hook that prunes orphaned worktrees."""

import os
import stat
from enum import Enum

from twig.constants import HOOK_MARKER, HOOK_NAME, HOOK_SCRIPT
from twig.services.git.operations import GitOperations
from twig.utils.logging import get_logger

logger = get_logger(__name__)


class HookInstallResult(Enum):
    """Outcome of install_prune_hook."""
    INSTALLED = "installed"
    UPDATED = "updated"
    ALREADY_INSTALLED = "already-installed"


def install_prune_hook(git_ops: GitOperations) -> HookInstallResult:
    """Make sure the post-checkout hook runs `twig prune`.

    The hook lives in the shared hooks directory, so it applies to every
    worktree. An existing hook keeps its content and gets the prune call
    appended; a hook that already mentions `twig prune` is left untouched.
    """
    hooks_dir = git_ops.git_path("hooks")
    hook_path = os.path.join(hooks_dir, HOOK_NAME)
    os.makedirs(hooks_dir, exist_ok=True)

    if os.path.exists(hook_path):
        with open(hook_path, encoding="utf-8") as f:
            existing = f.read()

        if HOOK_MARKER in existing:
            logger.debug(f"Prune hook already present in {hook_path}")
            return HookInstallResult.ALREADY_INSTALLED

        with open(hook_path, "a", encoding="utf-8") as f:
            f.write(("" if existing.endswith("\n") else "\n") + "\n" + HOOK_SCRIPT)
        logger.info(f"Appended prune call to {hook_path}")
        return HookInstallResult.UPDATED

    with open(hook_path, "w", encoding="utf-8") as f:
        f.write(HOOK_SCRIPT)
    mode = os.stat(hook_path).st_mode
    os.chmod(hook_path, mode | stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH)
    logger.info(f"Installed prune hook at {hook_path}")
    return HookInstallResult.INSTALLED
