"""
Local invocation package.

Resolves run configurations into validated invocation specs for `sam local invoke`.
"""

from .core.project import Project
from .core.resolver import InvocationSpecResolver
from .core.runtimes import Runtime, RuntimeGroup
from .handlers import HandlerResolverRegistry, HandlerResolverStrategy
from .models import InvocationSpec, RunConfiguration

__all__ = [
    "Project",
    "InvocationSpecResolver",
    "Runtime",
    "RuntimeGroup",
    "HandlerResolverRegistry",
    "HandlerResolverStrategy",
    "InvocationSpec",
    "RunConfiguration",
]
