"""Configuration handling for twig"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from twig.constants import GLOBAL_CONFIG_DIRNAME, GLOBAL_CONFIG_FILENAME, PROJECT_CONFIG_FILENAME
from twig.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Runtime configuration for twig with validation."""

    # Output
    verbose: bool = False
    debug: bool = False

    # Prompts
    assume_yes: bool = False

    # Worktree creation
    copy_untracked: bool = True
    bulk_copy_threshold: int = 10  # Files per top-level directory before copying it in one go
    workers: Optional[int] = None  # Copy workers (None = auto-detect)
    default_branch_candidates: List[str] = field(default_factory=lambda: ["main", "master"])

    # Install the post-checkout prune hook after `twig branch`
    install_hook: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_bulk_copy_threshold()
        self._validate_workers()
        self._validate_default_branch_candidates()

    def _validate_bulk_copy_threshold(self):
        if self.bulk_copy_threshold <= 0:
            raise ValueError(
                f"bulk_copy_threshold must be positive, got {self.bulk_copy_threshold}"
            )

    def _validate_workers(self):
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def _validate_default_branch_candidates(self):
        """Validate default_branch_candidates is a non-empty list of names."""
        if not isinstance(self.default_branch_candidates, list):
            raise ValueError("default_branch_candidates must be a list")
        candidates = [name.strip() for name in self.default_branch_candidates if name and name.strip()]
        if not candidates:
            raise ValueError("default_branch_candidates cannot be empty")
        self.default_branch_candidates = candidates

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "verbose": self.verbose,
            "debug": self.debug,
            "assume_yes": self.assume_yes,
            "copy_untracked": self.copy_untracked,
            "bulk_copy_threshold": self.bulk_copy_threshold,
            "workers": self.workers,
            "default_branch_candidates": self.default_branch_candidates,
            "install_hook": self.install_hook,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "verbose",
            "debug",
            "assume_yes",
            "copy_untracked",
            "bulk_copy_threshold",
            "workers",
            "default_branch_candidates",
            "install_hook",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


# ---------------------------------------------------------------------------
# Editor configuration


@dataclass(frozen=True)
class SimpleEditor:
    """Editor given as a bare command, e.g. ``"cursor"``."""

    command: str

    def resolve(self) -> Tuple[str, List[str]]:
        return self.command, ["."]


@dataclass(frozen=True)
class StructuredEditor:
    """Editor given as ``{"command": ..., "args": [...]}``."""

    command: str
    args: Optional[Tuple[str, ...]] = None

    def resolve(self) -> Tuple[str, List[str]]:
        return self.command, list(self.args) if self.args else ["."]


EditorConfig = Union[SimpleEditor, StructuredEditor]


def get_global_config_path() -> Path:
    """Return the global config file path for this platform."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(app_data) / GLOBAL_CONFIG_DIRNAME / GLOBAL_CONFIG_FILENAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(xdg_config) / GLOBAL_CONFIG_DIRNAME / GLOBAL_CONFIG_FILENAME


def load_config_file(path: Path) -> Optional[dict]:
    """Load a JSON config file.

    Returns:
        The parsed object, or None when the file is missing or unusable
    """
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed JSON in config file at {path}: {e}")
        return None
    except OSError as e:
        logger.warning(f"Error reading config file at {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Invalid config file at {path}: must be a JSON object")
        return None
    return data


def parse_editor_config(value, source: str) -> Optional[EditorConfig]:
    """Turn the raw ``editor`` value into an EditorConfig, or None if it is invalid."""
    if isinstance(value, str):
        return SimpleEditor(value)

    if isinstance(value, dict):
        command = value.get("command")
        if not isinstance(command, str):
            logger.warning(f"Invalid editor config in {source}: 'command' must be a string")
            return None

        args = value.get("args")
        if args is None:
            return StructuredEditor(command)
        if not isinstance(args, list):
            logger.warning(f"Invalid editor config in {source}: 'args' must be an array")
            return None
        if not all(isinstance(arg, str) for arg in args):
            logger.warning(f"Invalid editor config in {source}: all 'args' elements must be strings")
            return None
        return StructuredEditor(command, tuple(args))

    logger.warning(
        f"Invalid editor config in {source}: must be a string or object with 'command'"
    )
    return None


def detect_smart_default(target_dir: Path) -> Optional[str]:
    """Guess an editor from marker folders in the worktree."""
    markers = [(".cursor", "cursor"), (".vscode", "code"), (".claude", "claude")]
    for folder, command in markers:
        if (Path(target_dir) / folder).exists():
            return command
    return None


def load_editor_config(target_dir: Path) -> Optional[EditorConfig]:
    """Load editor configuration.

    Precedence:
        1. Per-project ``.twig`` file in the worktree
        2. Global config file
        3. Smart default from project markers
        4. None (caller falls back to cursor/code)
    """
    candidates = [Path(target_dir) / PROJECT_CONFIG_FILENAME, get_global_config_path()]
    for path in candidates:
        data = load_config_file(path)
        if data and data.get("editor"):
            editor = parse_editor_config(data["editor"], str(path))
            if editor:
                logger.debug(f"Using editor config from {path}: {editor}")
                return editor

    smart_default = detect_smart_default(target_dir)
    if smart_default:
        return SimpleEditor(smart_default)

    return None
