"""
twig - Git worktree manager with optional Dev Container integration
"""

from .__version__ import __version__
from .core import Twig
from .cli.main import main

__all__ = ["Twig", "main", "__version__"]
