"""Shared constants for twig."""

PROGRAM_NAME = "twig"

# Remote that base branches are fetched from
REMOTE_NAME = "origin"

# Config files
PROJECT_CONFIG_FILENAME = ".twig"
GLOBAL_CONFIG_DIRNAME = "twig"
GLOBAL_CONFIG_FILENAME = "config.json"

# post-checkout hook
HOOK_NAME = "post-checkout"
HOOK_MARKER = f"{PROGRAM_NAME} prune"
HOOK_SCRIPT = f"""#!/bin/sh
# Auto-installed by {PROGRAM_NAME}: prune orphaned worktrees
{HOOK_MARKER} --yes 2>/dev/null || true
"""

# Dev Container defaults
DEFAULT_DEVCONTAINER_IMAGE = "mcr.microsoft.com/devcontainers/base:ubuntu"
DEVCONTAINER_DIRNAME = ".devcontainer"
DEVCONTAINER_CLI = "devcontainer"
DEVCONTAINER_INSTALL_URL = "https://github.com/devcontainers/cli"

# Editors tried when nothing is configured, in order
FALLBACK_EDITORS = ["cursor", "code"]

EDITOR_NAMES = {
    "cursor": "Cursor",
    "code": "VS Code",
    "claude": "Claude",
    "vim": "Vim",
    "nvim": "Neovim",
    "emacs": "Emacs",
    "nano": "Nano",
}

# Shell completion block markers
COMPLETION_BEGIN_MARKER = f"# begin {PROGRAM_NAME} completion"
COMPLETION_END_MARKER = f"# end {PROGRAM_NAME} completion"

DETACHED_LABEL = "<detached>"
