"""Fallback record stores."""

from .base import FallbackStore
from .memory_store import InMemoryFallbackStore

__all__ = [
    "FallbackStore",
    "InMemoryFallbackStore",
]
