"""Dev Container scaffold and bring-up."""

import os
import subprocess
from typing import List

from rich.console import Console

from twig.constants import (
    DEFAULT_DEVCONTAINER_IMAGE,
    DEVCONTAINER_CLI,
    DEVCONTAINER_DIRNAME,
    DEVCONTAINER_INSTALL_URL,
)
from twig.exceptions import DevcontainerError
from twig.formatters.devcontainer import (
    generate_devcontainer_json,
    generate_dockerfile_content,
    generate_dockerignore_content,
)
from twig.utils.logging import get_logger
from twig.validation import validate_docker_image, validate_package_names, validate_port_list

console = Console()
logger = get_logger(__name__)


def devcontainer_up(directory: str) -> bool:
    """Run `devcontainer up` for the worktree.

    Returns:
        True if the container came up, False if the Dev Container CLI is not installed

    Raises:
        DevcontainerError: if the CLI ran and failed
    """
    command = [DEVCONTAINER_CLI, "up", "--workspace-folder", str(directory)]
    logger.debug(f"Running {' '.join(command)}")
    try:
        subprocess.run(command, check=True)
    except FileNotFoundError:
        console.print(f"[yellow]Dev Container CLI not found. Install from: {DEVCONTAINER_INSTALL_URL}[/yellow]")
        return False
    except subprocess.CalledProcessError as e:
        raise DevcontainerError(f"'{' '.join(command)}' exited with status {e.returncode}") from e
    except OSError as e:
        raise DevcontainerError(str(e)) from e
    return True


def init_devcontainer(
    repo_root: str,
    image: str = DEFAULT_DEVCONTAINER_IMAGE,
    packages: str = "",
    ports: str = "",
    postcreate: str = "",
    mount_node_modules: bool = False,
) -> List[str]:
    """Write .devcontainer/{Dockerfile,devcontainer.json,.dockerignore} under repo_root.

    Existing files are left alone.

    Returns:
        Paths of the files that were written
    """
    image = (image or DEFAULT_DEVCONTAINER_IMAGE).strip()
    packages = (packages or "").strip()
    ports = (ports or "").strip()
    postcreate = (postcreate or "").strip()

    validate_docker_image(image)
    validate_package_names(packages)
    validate_port_list(ports)

    dev_dir = os.path.join(repo_root, DEVCONTAINER_DIRNAME)
    os.makedirs(dev_dir, exist_ok=True)

    files = [
        ("Dockerfile", lambda: generate_dockerfile_content(image, packages)),
        ("devcontainer.json", lambda: generate_devcontainer_json(ports, mount_node_modules, postcreate)),
        (".dockerignore", generate_dockerignore_content),
    ]

    written = []
    for name, render in files:
        path = os.path.join(dev_dir, name)
        if os.path.exists(path):
            logger.debug(f"Keeping existing {path}")
            continue
        with open(path, "w", encoding="utf-8") as f:
            f.write(render())
        console.print(f"Wrote {os.path.relpath(path, repo_root)}")
        written.append(path)

    console.print(
        f"Dev container scaffold complete. Commit {DEVCONTAINER_DIRNAME}/ to share across worktrees."
    )
    return written
