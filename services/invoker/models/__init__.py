"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .reference import (
    DirectReference,
    FilePath,
    FunctionReference,
    InlineText,
    InputSource,
    TemplateReference,
)
from .run_configuration import FunctionOptions, InputOptions, RunConfiguration
from .spec import (
    AwsCredentials,
    HandlerLocation,
    InvocationSpec,
    Region,
    ResolvedFunction,
    SourceElement,
    TemplateDetails,
)

__all__ = [
    "DirectReference",
    "FilePath",
    "FunctionReference",
    "InlineText",
    "InputSource",
    "TemplateReference",
    "FunctionOptions",
    "InputOptions",
    "RunConfiguration",
    "AwsCredentials",
    "HandlerLocation",
    "InvocationSpec",
    "Region",
    "ResolvedFunction",
    "SourceElement",
    "TemplateDetails",
]
