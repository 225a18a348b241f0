"""
Handler resolver package.

Provides the strategy interface, the registry, and the bundled strategies.
"""

from .base import HandlerResolverStrategy
from .go import GoHandlerResolver
from .python import PythonHandlerResolver
from .registry import HandlerResolverRegistry

__all__ = [
    "HandlerResolverStrategy",
    "GoHandlerResolver",
    "PythonHandlerResolver",
    "HandlerResolverRegistry",
]
