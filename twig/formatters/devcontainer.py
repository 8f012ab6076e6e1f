"""Content for .devcontainer/Dockerfile, devcontainer.json and .dockerignore."""

import json
from typing import List, Optional

DOCKERIGNORE_ENTRIES = [
    ".git",
    ".gitignore",
    "node_modules",
    "**/__pycache__",
    "**/*.pyc",
    ".DS_Store",
]


def format_package_list(packages: str) -> str:
    """One package per line, each but the last followed by a continuation backslash."""
    names = packages.split()
    continuation = " \\"
    return "\n".join(
        "    " + name + (continuation if i < len(names) - 1 else "")
        for i, name in enumerate(names)
    )


def format_ports(ports: str) -> List[str]:
    """Comma-separated ports as the string list forwardPorts expects."""
    if not ports or not ports.strip():
        return []
    return [port.strip() for port in ports.split(",")]


def format_mounts(mount_node_modules: bool) -> List[str]:
    if not mount_node_modules:
        return []
    return [
        "source=${localWorkspaceFolderBasename}-node_modules,"
        "target=/work/node_modules,type=volume"
    ]


def format_post_create_command(postcreate: str) -> Optional[str]:
    return postcreate if postcreate else None


def generate_dockerfile_content(image: str, packages: str = "") -> str:
    """Dockerfile from the base image, with an apt-get layer when packages are given."""
    content = f'FROM {image}\nSHELL ["/bin/bash","-lc"]\n'
    if packages and packages.strip():
        content += (
            "\n"
            "RUN export DEBIAN_FRONTEND=noninteractive && \\\n"
            "    apt-get update && \\\n"
            "    apt-get install -y --no-install-recommends \\\n"
            f"{format_package_list(packages)} \\\n"
            "    && apt-get clean && rm -rf /var/lib/apt/lists/*\n"
        )
    return content


def generate_devcontainer_json(
    ports: str = "", mount_node_modules: bool = False, postcreate: str = ""
) -> str:
    """devcontainer.json mounting the worktree at /work."""
    config = {
        "name": "repo-${localWorkspaceFolderBasename}",
        "build": {"dockerfile": "Dockerfile"},
        "workspaceFolder": "/work",
        "workspaceMount": "source=${localWorkspaceFolder},target=/work,type=bind,consistency=cached",
        "runArgs": ["--name", "dev-${localWorkspaceFolderBasename}"],
        "forwardPorts": format_ports(ports),
        "mounts": format_mounts(mount_node_modules),
        "postCreateCommand": format_post_create_command(postcreate),
        "customizations": {
            "vscode": {
                "settings": {"terminal.integrated.defaultProfile.linux": "bash"},
                "extensions": [],
            }
        },
    }
    return json.dumps(config, indent=2) + "\n"


def generate_dockerignore_content() -> str:
    return "\n".join(DOCKERIGNORE_ENTRIES) + "\n"
