"""Command-line entry point for twig"""

import os
import sys

from rich.console import Console
from rich.markup import escape

from twig.cli.args import parse_args
from twig.completion import cleanup_completion, setup_completion
from twig.config import Config
from twig.core import Twig
from twig.exceptions import TwigError, UserAbortedError
from twig.services.devcontainer_service import devcontainer_up
from twig.services.editor_service import open_in_editor
from twig.utils.logging import setup_logging
from twig.utils.threading import get_optimal_worker_count, is_free_threading_enabled

console = Console()


def run_branch(twig: Twig, args) -> None:
    path = twig.branch(args.target, base=args.base, directory=args.directory)
    console.print(path, markup=False, highlight=False, soft_wrap=True)
    if args.in_container:
        devcontainer_up(path)
    open_in_editor(path)


def run_completion(args) -> None:
    if args.setup:
        setup_completion()
    elif args.cleanup:
        cleanup_completion()
    else:
        console.print("Usage: twig completion --setup | --cleanup")
        console.print("  --setup    Install shell completion")
        console.print("  --cleanup  Remove shell completion")


def dispatch(args) -> None:
    """Run the subcommand selected by args."""
    if args.command == "completion":
        run_completion(args)
        return

    config = Config(
        verbose=args.verbose,
        debug=args.debug,
        assume_yes=getattr(args, "yes", False),
    )

    if args.debug:
        console.print("[yellow]Debug mode enabled[/yellow]")
        console.print("[yellow]Configuration:[/yellow]")
        for key, value in config.to_dict().items():
            console.print(f"  {key}: {value}")
        console.print(f"  copy workers: {get_optimal_worker_count(config.workers)}")
        console.print(f"  free-threading: {is_free_threading_enabled()}")

    twig = Twig(os.getcwd(), config)

    if args.command == "branch":
        run_branch(twig, args)
    elif args.command == "list":
        twig.list_worktrees(names_only=args.names)
    elif args.command == "delete":
        twig.delete_worktree(args.target, keep_branch=args.keep_branch)
    elif args.command == "prune":
        twig.prune()
    elif args.command == "init-devcontainer":
        twig.init_devcontainer(
            image=args.image,
            packages=args.packages,
            ports=args.ports,
            postcreate=args.postcreate,
            mount_node_modules=args.mount_node_modules,
        )


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)
        dispatch(parsed_args)
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except UserAbortedError:
        console.print("[yellow]Aborted.[/yellow]")
        return 1
    except TwigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
