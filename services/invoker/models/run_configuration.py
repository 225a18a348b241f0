"""
Run configuration models.

Persisted, editable state of a local run configuration. The surrounding
adapter (CLI, editor) mutates it; the resolver only reads it.
"""

from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field

from .reference import DirectReference, FilePath, InlineText, TemplateReference


class FunctionOptions(BaseModel):
    use_template: bool = False
    template_file: Optional[str] = None
    logical_id: Optional[str] = None
    handler: Optional[str] = None
    runtime: Optional[str] = None
    environment_variables: Dict[str, str] = Field(default_factory=dict)


class InputOptions(BaseModel):
    use_file: bool = False
    text: Optional[str] = None
    file: Optional[str] = None


class RunConfiguration(BaseModel):
    """Local invocation settings as the user edited them."""

    name: Optional[str] = None
    function_options: FunctionOptions = Field(default_factory=FunctionOptions)
    region_id: Optional[str] = None
    credential_provider_id: Optional[str] = None
    input: InputOptions = Field(default_factory=InputOptions)

    def use_template(self, template_file: Optional[str], logical_id: Optional[str]) -> None:
        options = self.function_options
        options.use_template = True
        options.template_file = template_file
        options.logical_id = logical_id
        options.handler = None
        options.runtime = None

    def use_handler(self, runtime: Optional[str], handler: Optional[str]) -> None:
        options = self.function_options
        options.use_template = False
        options.template_file = None
        options.logical_id = None
        options.handler = handler
        options.runtime = str(runtime) if runtime is not None else None

    def use_input_text(self, text: Optional[str]) -> None:
        self.input.use_file = False
        self.input.text = text
        self.input.file = None

    def use_input_file(self, path: Optional[str]) -> None:
        self.input.use_file = True
        self.input.file = path
        self.input.text = None

    def is_using_template(self) -> bool:
        return self.function_options.use_template

    def function_reference(self) -> Union[TemplateReference, DirectReference]:
        options = self.function_options
        if options.use_template:
            return TemplateReference(
                template_path=options.template_file, logical_id=options.logical_id
            )
        return DirectReference(handler=options.handler, runtime=options.runtime)

    def input_source(self) -> Union[InlineText, FilePath]:
        if self.input.use_file:
            return FilePath(path=self.input.file)
        return InlineText(text=self.input.text)

    def suggested_name(self, handler_display_name: Optional[str] = None) -> Optional[str]:
        sub_name = self.function_options.logical_id or handler_display_name
        if sub_name is None:
            sub_name = self.function_options.handler
        if sub_name is None:
            return None
        return f"[Local] {sub_name}"

    @classmethod
    def load(cls, path: Union[str, Path]) -> "RunConfiguration":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="json", exclude_none=True),
                f,
                sort_keys=False,
                default_flow_style=False,
            )
