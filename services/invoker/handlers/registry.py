"""
Handler resolver registry.

Maps runtime groups to handler resolver strategies. Strategies shipped by other
distributions are discovered through the `sam_local_invoke.handler_resolvers`
entry-point group; each entry point must name a HandlerResolverStrategy subclass.
"""

import logging
from importlib.metadata import entry_points
from typing import Dict, Optional

from ..core.runtimes import Runtime, RuntimeGroup, runtime_group
from .base import HandlerResolverStrategy

logger = logging.getLogger("invoker.handlers.registry")

ENTRY_POINT_GROUP = "sam_local_invoke.handler_resolvers"


class HandlerResolverRegistry:
    def __init__(self):
        self._strategies: Dict[RuntimeGroup, HandlerResolverStrategy] = {}

    def register(self, strategy: HandlerResolverStrategy) -> None:
        group = RuntimeGroup(strategy.runtime_group)
        if group in self._strategies:
            logger.info(
                f"Replacing handler resolver for {group}: "
                f"{type(self._strategies[group]).__name__} -> {type(strategy).__name__}"
            )
        self._strategies[group] = strategy

    def get(self, group: Optional[RuntimeGroup]) -> Optional[HandlerResolverStrategy]:
        if group is None:
            return None
        return self._strategies.get(group)

    def for_runtime(self, runtime: Optional[Runtime]) -> Optional[HandlerResolverStrategy]:
        return self.get(runtime_group(runtime))

    def load_entry_points(self) -> None:
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                strategy_cls = ep.load()
                self.register(strategy_cls())
            except Exception as e:
                logger.warning(f"Failed to load handler resolver '{ep.name}': {e}")

    @classmethod
    def create_default(cls, load_plugins: bool = True) -> "HandlerResolverRegistry":
        from .go import GoHandlerResolver
        from .python import PythonHandlerResolver

        registry = cls()
        registry.register(PythonHandlerResolver())
        registry.register(GoHandlerResolver())
        if load_plugins:
            registry.load_entry_points()
        return registry
