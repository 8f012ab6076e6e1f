"""Formatters that render the Dev Container scaffold files."""

from .devcontainer import (
    format_package_list,
    format_ports,
    format_mounts,
    format_post_create_command,
    generate_dockerfile_content,
    generate_devcontainer_json,
    generate_dockerignore_content,
)

__all__ = [
    "format_package_list",
    "format_ports",
    "format_mounts",
    "format_post_create_command",
    "generate_dockerfile_content",
    "generate_devcontainer_json",
    "generate_dockerignore_content",
]
