"""Open a worktree in the user's editor."""

import shutil
import subprocess
from typing import List, Optional

from rich.console import Console

from twig.config import EditorConfig, get_global_config_path, load_editor_config
from twig.constants import EDITOR_NAMES, FALLBACK_EDITORS, PROJECT_CONFIG_FILENAME
from twig.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def get_editor_name(command: str) -> str:
    """Friendly name for well-known editors."""
    return EDITOR_NAMES.get(command, command)


def command_exists(command: str) -> bool:
    return shutil.which(command) is not None


def spawn_detached(command: str, args: List[str], cwd: str) -> None:
    """Start the editor without waiting for it."""
    subprocess.Popen(
        [command, *args],
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def open_in_editor(directory: str, editor: Optional[EditorConfig] = None) -> Optional[str]:
    """Open directory in the configured editor, falling back to Cursor, then VS Code.

    Args:
        directory: Worktree to open
        editor: Editor override; loaded from config files when omitted

    Returns:
        The command that was launched, or None
    """
    tip = f"{get_global_config_path()} or {directory}/{PROJECT_CONFIG_FILENAME}"
    config = editor or load_editor_config(directory)

    if config is not None:
        command, args = config.resolve()

        if command == "none":
            console.print(f'Editor launch skipped (configured as "none"): {directory}')
            console.print(f"[dim]Tip: Edit {tip} to change this[/dim]")
            return None

        if command_exists(command):
            spawn_detached(command, args, directory)
            console.print(f"Opened in {get_editor_name(command)}: {directory}")
            return command

        logger.warning(f"Configured editor '{command}' not found on PATH. Trying fallback...")
        console.print(f"[dim]Tip: Edit {tip} to change editor config[/dim]")

    for command in FALLBACK_EDITORS:
        if command_exists(command):
            spawn_detached(command, ["."], directory)
            console.print(f"Opened in {get_editor_name(command)}: {directory}")
            return command

    console.print(f"No editor found. Open manually: {directory}")
    console.print(f"[dim]Tip: Configure your preferred editor in {tip}[/dim]")
    return None
