"""Core orchestration for twig."""

from .twig import Twig

__all__ = ["Twig"]
