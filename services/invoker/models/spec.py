"""
Invocation spec models.

Defines the resolved, validated values handed to the execution layer.
All models here are frozen: equal inputs produce value-equal specs.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from ..core.runtimes import Runtime, RuntimeGroup, runtime_group
from ..exceptions import InputUnresolvable


class TemplateDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    template_path: str
    logical_id: str


class ResolvedFunction(BaseModel):
    """Result of dereferencing a FunctionReference."""

    model_config = ConfigDict(frozen=True)

    handler: str
    runtime: Runtime
    template_details: Optional[TemplateDetails] = None


class HandlerLocation(BaseModel):
    """Navigable position of a handler declaration in project sources."""

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str
    line: int
    end_line: int
    source_root: Optional[Path] = None

    def __str__(self) -> str:
        return f"{self.path}:{self.line} ({self.name})"


class SourceElement(BaseModel):
    """A declaration in a source file, as reported by a rename or move."""

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str
    line: int
    end_line: int
    kind: str = "function"
    source_root: Optional[Path] = None

    def encloses(self, location: HandlerLocation) -> bool:
        """Whether this element contains the given location (or is the same declaration)."""
        if Path(self.path).resolve() != Path(location.path).resolve():
            return False
        return self.line <= location.line and location.end_line <= self.end_line


class Region(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    partition: str = "aws"


class AwsCredentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider_id: str
    access_key_id: str
    secret_access_key: SecretStr
    session_token: Optional[SecretStr] = None

    def to_environment(self) -> Dict[str, str]:
        env = {
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key.get_secret_value(),
        }
        if self.session_token is not None:
            env["AWS_SESSION_TOKEN"] = self.session_token.get_secret_value()
        return env


class InvocationSpec(BaseModel):
    """
    Fully validated bundle of everything needed to start a local invocation.

    Exactly one of `input_text` / `input_file` is set. A file input is only
    checked for readability during validation; its content is read by
    `read_input()` at invocation time.
    """

    model_config = ConfigDict(frozen=True)

    runtime: Runtime
    handler: str
    input_text: Optional[str] = None
    input_file: Optional[Path] = None
    environment_variables: Dict[str, str] = Field(default_factory=dict)
    credentials: AwsCredentials
    region: Region
    handler_location: HandlerLocation
    template_details: Optional[TemplateDetails] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "InvocationSpec":
        if (self.input_text is None) == (self.input_file is None):
            raise ValueError("exactly one of input_text or input_file must be set")
        if runtime_group(self.runtime) is None:
            raise ValueError(f"Attempting to run SAM for unsupported runtime {self.runtime}")
        return self

    @property
    def runtime_group(self) -> RuntimeGroup:
        return runtime_group(self.runtime)

    def read_input(self) -> str:
        if self.input_text is not None:
            return self.input_text
        try:
            return Path(self.input_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputUnresolvable(f"cannot read input file {self.input_file}: {e}") from e
