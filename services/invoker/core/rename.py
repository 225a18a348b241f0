"""
Where: services/invoker/core/rename.py
What: Keep a run configuration's handler in sync when its source declaration is renamed or moved.
Why: A stale handler identifier turns into HandlerNotFound on the next run.

Only the value replaced by the latest rename is remembered; undo restores it once.
"""

import logging
from typing import Optional

from ..handlers.base import HandlerResolverStrategy
from ..handlers.registry import HandlerResolverRegistry
from ..models.reference import DirectReference
from ..models.run_configuration import RunConfiguration
from ..models.spec import ResolvedFunction, SourceElement
from .project import Project
from .runtimes import Runtime

logger = logging.getLogger("invoker.rename")


def on_source_renamed(
    reference: DirectReference, new_element: SourceElement, strategy: HandlerResolverStrategy
) -> DirectReference:
    """Return `reference` with its handler recomputed from the renamed element (unchanged if none)."""
    new_handler = strategy.determine_handler_identifier(new_element)
    if new_handler is None:
        return reference
    return reference.model_copy(update={"handler": new_handler})


class HandlerRenameListener:
    def __init__(self, configuration: RunConfiguration, strategy: HandlerResolverStrategy):
        self.configuration = configuration
        self.strategy = strategy
        self._previous_handler: Optional[str] = None
        self._has_previous = False

    def element_renamed_or_moved(self, new_element: SourceElement) -> None:
        options = self.configuration.function_options
        updated = on_source_renamed(
            DirectReference(handler=options.handler, runtime=options.runtime),
            new_element,
            self.strategy,
        )
        if updated.handler == options.handler:
            return
        logger.info(f"Handler renamed: {options.handler} -> {updated.handler}")
        self._previous_handler = options.handler
        self._has_previous = True
        options.handler = updated.handler

    def undo_element_moved_or_renamed(self) -> None:
        if not self._has_previous:
            return
        self.configuration.function_options.handler = self._previous_handler
        self._previous_handler = None
        self._has_previous = False


def refactoring_listener(
    configuration: RunConfiguration,
    element: SourceElement,
    project: Project,
    resolver,
) -> Optional[HandlerRenameListener]:
    """
    Listener for a pending rename/move of `element`, or None if it does not affect the handler.

    `resolver` is an InvocationSpecResolver; only handler-mode configurations are tracked.
    """
    options = configuration.function_options
    if options.use_template or not options.handler:
        return None
    runtime = Runtime.from_value(options.runtime)
    if runtime is None:
        return None

    registry: HandlerResolverRegistry = resolver.handler_registry
    strategy = registry.for_runtime(runtime)
    if strategy is None:
        return None

    location = resolver.locate_handler_source(
        ResolvedFunction(handler=options.handler, runtime=runtime), project
    )
    if location is None or not element.encloses(location):
        return None
    return HandlerRenameListener(configuration, strategy)
