"""Include graph model."""

from .model import IncludeGraph

__all__ = ["IncludeGraph"]
