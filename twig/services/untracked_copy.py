"""Copy untracked files into a freshly created worktree.

A new worktree only contains tracked files. Ignored and new files from the
source checkout (.env files, build output, dependency caches) are copied over
so the new worktree is usable right away. The whole step is best effort: the
worktree already exists by the time it runs, so failures are logged and never
raised.
"""

import os
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from rich.progress import Progress

from twig.exceptions import GitOperationError
from twig.services.git.operations import GitOperations
from twig.utils.logging import get_logger
from twig.utils.threading import get_optimal_worker_count

logger = get_logger(__name__)

DEFAULT_BULK_COPY_THRESHOLD = 10


@dataclass
class CopyResult:
    """Outcome of an untracked-file copy."""

    total: int = 0
    copied: int = 0
    failed: int = 0


def group_by_top_level(files: List[str]) -> Dict[str, List[str]]:
    """Group git-style relative paths by their first path component."""
    groups: Dict[str, List[str]] = {}
    for rel_path in files:
        top = rel_path.split("/", 1)[0]
        groups.setdefault(top, []).append(rel_path)
    return groups


def _copy_file(source: str, dest: str, rel_path: str) -> bool:
    """Copy one file, creating parent directories. Returns False on failure."""
    src_path = os.path.join(source, *rel_path.split("/"))
    dest_path = os.path.join(dest, *rel_path.split("/"))
    try:
        os.makedirs(os.path.dirname(dest_path), exist_ok=True)
        shutil.copy2(src_path, dest_path, follow_symlinks=False)
        return True
    except OSError as e:
        logger.warning(f"Could not copy {rel_path}: {e}")
        return False


def _copy_tree(source: str, dest: str, top: str, files: List[str]) -> None:
    """Copy the top-level directory in one call, restricted to the given files."""
    wanted = set(files)
    wanted_dirs = set()
    for rel_path in files:
        parts = rel_path.split("/")[:-1]
        for i in range(1, len(parts) + 1):
            wanted_dirs.add("/".join(parts[:i]))

    def ignore(dirpath: str, names: List[str]) -> List[str]:
        rel_dir = os.path.relpath(dirpath, source).replace(os.sep, "/")
        return [
            name for name in names
            if f"{rel_dir}/{name}" not in wanted and f"{rel_dir}/{name}" not in wanted_dirs
        ]

    shutil.copytree(
        os.path.join(source, top),
        os.path.join(dest, top),
        symlinks=True,
        ignore=ignore,
        dirs_exist_ok=True,
    )


def _copy_group(
    source: str, dest: str, top: str, files: List[str], threshold: int
) -> Tuple[int, int]:
    """Copy one top-level group. Returns (copied, failed)."""
    src_top = os.path.join(source, top)
    if len(files) >= threshold and os.path.isdir(src_top) and not os.path.islink(src_top):
        try:
            _copy_tree(source, dest, top, files)
            logger.debug(f"Bulk copied {len(files)} file(s) under {top}/")
            return len(files), 0
        except (OSError, shutil.Error) as e:
            logger.warning(f"Bulk copy of {top}/ failed, copying files individually: {e}")

    copied = failed = 0
    for rel_path in files:
        if _copy_file(source, dest, rel_path):
            copied += 1
        else:
            failed += 1
    return copied, failed


def copy_untracked_files(
    git_ops: GitOperations,
    source: str,
    dest: str,
    threshold: int = DEFAULT_BULK_COPY_THRESHOLD,
    workers: Optional[int] = None,
    show_progress: bool = True,
) -> CopyResult:
    """Copy files git reports as untracked in source into dest, keeping relative paths.

    Files are grouped by top-level directory; groups with at least
    ``threshold`` files are copied with a single copytree call, and groups are
    processed in parallel.

    Args:
        git_ops: Git command boundary used to list untracked files
        source: Working directory to copy from
        dest: New worktree directory
        threshold: Group size at which a top-level directory is bulk copied
        workers: Worker count override (None = auto-detect)
        show_progress: Show a progress bar

    Returns:
        CopyResult with totals; never raises
    """
    try:
        listed = git_ops.untracked_files(source)
    except GitOperationError as e:
        logger.warning(f"Failed to copy untracked files: {e}")
        return CopyResult()

    files = []
    for rel_path in listed:
        # Nested repositories are reported as directories
        if rel_path.endswith("/"):
            logger.debug(f"Skipping untracked directory {rel_path}")
            continue
        files.append(rel_path)

    result = CopyResult(total=len(files))
    if not files:
        return result

    groups = group_by_top_level(files)
    max_workers = get_optimal_worker_count(workers, jobs=len(groups))
    logger.debug(f"Copying {len(files)} untracked file(s) in {len(groups)} group(s) with {max_workers} workers")

    progress_context = Progress(transient=True) if show_progress else nullcontext()
    with progress_context as progress:
        task = (
            progress.add_task("Copying untracked files...", total=len(files))
            if progress is not None
            else None
        )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_group = {
                executor.submit(_copy_group, source, dest, top, group_files, threshold): (top, group_files)
                for top, group_files in groups.items()
            }

            for future in as_completed(future_to_group):
                top, group_files = future_to_group[future]
                try:
                    copied, failed = future.result()
                except Exception as e:
                    logger.warning(f"Error copying untracked files under {top}: {e}")
                    copied, failed = 0, len(group_files)
                result.copied += copied
                result.failed += failed
                if progress is not None:
                    progress.update(task, advance=len(group_files))

    if result.failed:
        logger.warning(f"{result.failed} untracked file(s) could not be copied")
    return result
