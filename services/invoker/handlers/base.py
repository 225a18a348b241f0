"""
Handler resolver strategy interface.

One implementation per runtime group. The resolver core selects a strategy
through the registry and never special-cases a language itself.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..core.project import Project
from ..core.runtimes import Runtime, RuntimeGroup
from ..models.spec import HandlerLocation, SourceElement


class HandlerResolverStrategy(ABC):
    """Maps handler identifiers to source declarations for one language family."""

    runtime_group: RuntimeGroup

    @abstractmethod
    def find_source_locations(
        self, project: Project, runtime: Runtime, handler: str
    ) -> List[HandlerLocation]:
        """
        Find declarations matching a handler identifier.

        Returns an empty list when nothing matches. Must not modify the project.
        """

    @abstractmethod
    def determine_handler_identifier(self, element: SourceElement) -> Optional[str]:
        """Reverse lookup: the handler identifier naming `element`, or None if it cannot be a handler."""

    @abstractmethod
    def is_valid_handler_signature(self, declaration: Any) -> bool:
        """Whether a parsed declaration satisfies the language's handler call signature."""

    def handler_display_name(self, handler: str) -> str:
        return handler
