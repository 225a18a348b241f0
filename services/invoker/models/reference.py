"""
Function reference and input source models.

Both are tagged variants: the `kind` field selects the variant explicitly,
so a half-edited reference is never reinterpreted from which fields happen to be set.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class TemplateReference(BaseModel):
    """A function declared in a SAM template, addressed by its logical id."""

    kind: Literal["template"] = "template"
    template_path: Optional[str] = None
    logical_id: Optional[str] = None


class DirectReference(BaseModel):
    """A handler identifier plus a runtime, without a template."""

    kind: Literal["handler"] = "handler"
    handler: Optional[str] = None
    runtime: Optional[str] = None


FunctionReference = Annotated[
    Union[TemplateReference, DirectReference], Field(discriminator="kind")
]


class InlineText(BaseModel):
    kind: Literal["text"] = "text"
    text: Optional[str] = None


class FilePath(BaseModel):
    kind: Literal["file"] = "file"
    path: Optional[str] = None


InputSource = Annotated[Union[InlineText, FilePath], Field(discriminator="kind")]
