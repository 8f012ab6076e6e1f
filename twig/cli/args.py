"""Command-line argument parsing for twig."""

import argparse

import argcomplete

from twig.__version__ import __version__
from twig.completion import branch_completer, worktree_branch_completer
from twig.constants import DEFAULT_DEVCONTAINER_IMAGE, PROGRAM_NAME


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Git worktree manager with optional Dev Container integration",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"{PROGRAM_NAME} {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    branch = subparsers.add_parser(
        "branch",
        aliases=["b"],
        help="Open the worktree for a branch, creating it (and the branch) if needed",
    )
    branch.add_argument(
        "target", metavar="branchOrPath", help="Branch name or worktree directory"
    ).completer = branch_completer
    branch.add_argument(
        "--base", help="Base branch for a new branch (default: main, then master)"
    ).completer = branch_completer
    branch.add_argument(
        "-d", "--dir", dest="directory", help="Directory for the new worktree (default: ../<repo>-<branch>)"
    )
    branch.add_argument(
        "--in-container", action="store_true", help="Start the Dev Container for the worktree"
    )
    branch.add_argument("-y", "--yes", action="store_true", help="Skip confirmations")

    list_parser = subparsers.add_parser("list", aliases=["ls"], help="List worktrees")
    list_parser.add_argument(
        "--names", action="store_true", help="Print only branch names, one per line"
    )

    delete = subparsers.add_parser("delete", aliases=["d"], help="Delete a worktree and its branch")
    delete.add_argument(
        "target", metavar="branchOrPath", help="Branch name or worktree directory"
    ).completer = worktree_branch_completer
    delete.add_argument(
        "--keep-branch", action="store_true", help="Remove the worktree but keep the branch"
    )
    delete.add_argument("-y", "--yes", action="store_true", help="Skip confirmations")

    prune = subparsers.add_parser(
        "prune", aliases=["p"], help="Remove worktrees whose branch no longer exists"
    )
    prune.add_argument("-y", "--yes", action="store_true", help="Skip confirmations")

    init = subparsers.add_parser(
        "init-devcontainer", aliases=["i"], help="Scaffold .devcontainer/ at the repository root"
    )
    init.add_argument(
        "--image",
        default=DEFAULT_DEVCONTAINER_IMAGE,
        help=f"Base Docker image (default: {DEFAULT_DEVCONTAINER_IMAGE})",
    )
    init.add_argument("--packages", default="", help="Space-separated apt packages to install")
    init.add_argument("--ports", default="", help="Comma-separated ports to forward")
    init.add_argument("--postcreate", default="", help="Command to run after the container is created")
    init.add_argument(
        "--mount-node-modules",
        action="store_true",
        help="Keep node_modules in a named volume",
    )

    completion = subparsers.add_parser("completion", help="Manage shell completion")
    completion.add_argument("--setup", action="store_true", help="Install completion in your shell")
    completion.add_argument("--cleanup", action="store_true", help="Remove completion from your shell")

    return parser


COMMAND_ALIASES = {
    "b": "branch",
    "ls": "list",
    "d": "delete",
    "p": "prune",
    "i": "init-devcontainer",
}


def parse_args(argv=None):
    """Parse command-line arguments.

    The `command` attribute is normalized to the canonical command name.
    """
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)
    args.command = COMMAND_ALIASES.get(args.command, args.command)
    return args
