"""Input validation for user-provided values.

Every check runs before git or the filesystem is touched and raises
ValidationError naming the offending input and the rule it broke.
"""

import re

from twig.exceptions import ValidationError

# Simplified git-check-ref-format rules; covers the common mistakes
_BRANCH_NAME_RULES = [
    (re.compile(r"^\."), "cannot start with a dot"),
    (re.compile(r"\.\.|@\{|\\"), "cannot contain .., @{, or \\"),
    (re.compile(r"[\s~^:?*\[\]]"), "cannot contain spaces or ~^:?*[]"),
    (re.compile(r"/$"), "cannot end with /"),
    (re.compile(r"\.lock$"), "cannot end with .lock"),
    (re.compile(r"^/|//"), "cannot start with / or contain //"),
]

_SHELL_METACHARACTERS = re.compile(r"[;&|`$()]")
_PACKAGE_NAME = re.compile(r"^[a-zA-Z0-9.+-]+$")


def validate_branch_name(name: str) -> None:
    """Validate a git branch name.

    Raises:
        ValidationError: if the name is empty or breaks a ref-format rule
    """
    if not name or not name.strip():
        raise ValidationError("Branch name cannot be empty")

    for pattern, message in _BRANCH_NAME_RULES:
        if pattern.search(name):
            raise ValidationError(f"Invalid branch name '{name}': {message}")


def validate_port_list(ports: str) -> None:
    """Validate a comma-separated list of port numbers (e.g. "3000,8080").

    An empty string is valid.
    """
    if not ports or not ports.strip():
        return

    for port in (p.strip() for p in ports.split(",")):
        if not re.fullmatch(r"[0-9]+", port) or not 1 <= int(port) <= 65535:
            raise ValidationError(
                f"Invalid port '{port}': must be a number between 1 and 65535"
            )


def validate_docker_image(image: str) -> None:
    """Validate a Docker image reference such as ``mcr.microsoft.com/base:latest``."""
    if not image or not image.strip():
        raise ValidationError("Docker image name cannot be empty")

    if re.search(r"\s", image):
        raise ValidationError(f"Invalid Docker image '{image}': cannot contain whitespace")

    # Only the repository part must be lowercase; the registry host may not be
    image_part = image.split("/")[-1].split(":")[0]
    if re.search(r"[A-Z]", image_part):
        raise ValidationError(f"Invalid Docker image '{image}': image name must be lowercase")


def validate_package_names(packages: str) -> None:
    """Validate space-separated apt package names."""
    if not packages or not packages.strip():
        return

    for pkg in packages.split():
        if _SHELL_METACHARACTERS.search(pkg):
            raise ValidationError(f"Invalid package name '{pkg}': contains shell metacharacters")
        if not _PACKAGE_NAME.match(pkg):
            raise ValidationError(
                f"Invalid package name '{pkg}': must contain only alphanumeric characters, "
                "dots, hyphens, and plus signs"
            )
