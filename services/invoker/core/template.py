"""
SAM Template Parser

Parse SAM / CloudFormation templates (YAML or JSON) and extract Lambda function information.
Safely handle CloudFormation intrinsic functions (!Sub, !Ref, etc.).
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field
from yaml.constructor import ConstructorError

logger = logging.getLogger("invoker.template")

SERVERLESS_FUNCTION = "AWS::Serverless::Function"
LAMBDA_FUNCTION = "AWS::Lambda::Function"
FUNCTION_TYPES = (SERVERLESS_FUNCTION, LAMBDA_FUNCTION)

_PARAM_PATTERN = re.compile(r"\$\{([\w:.]+)\}")


class TemplateError(Exception):
    """Raised when a template cannot be read or parsed."""

    def __init__(self, template_path: str, reason: str):
        self.template_path = template_path
        self.reason = reason
        super().__init__(f"{template_path}: {reason}")


class TemplateFunction(BaseModel):
    """A function resource declared in a template."""

    logical_id: str
    resource_type: str = SERVERLESS_FUNCTION
    handler: Optional[str] = None
    runtime: Optional[str] = None
    code_uri: Optional[str] = None
    environment: Dict[str, str] = Field(default_factory=dict)


class CfnLoader(yaml.SafeLoader):
    """YAML loader that handles CloudFormation intrinsic functions and rejects duplicate keys."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=True)
                if isinstance(key, (list, dict)):
                    continue
                if key in seen:
                    raise ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key {key!r}",
                        key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def cfn_constructor(loader: yaml.Loader, node: yaml.Node) -> Any:
    """Constructor for CloudFormation tags: `!Sub x` becomes `{"Fn::Sub": x}`."""
    tag = node.tag[1:]
    name = tag if tag in ("Ref", "Condition") else f"Fn::{tag}"

    if isinstance(node, yaml.ScalarNode):
        value = loader.construct_scalar(node)
        if tag == "GetAtt":
            value = value.split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return {name: value}


# Register CloudFormation tags.
for tag in [
    "!Ref",
    "!Sub",
    "!GetAtt",
    "!ImportValue",
    "!If",
    "!Join",
    "!Select",
    "!Split",
    "!FindInMap",
    "!Base64",
    "!Equals",
    "!Not",
    "!And",
    "!Or",
    "!Condition",
    "!GetAZs",
]:
    yaml.add_constructor(tag, cfn_constructor, Loader=CfnLoader)


def parse_sam_template(content: str, parameters: Optional[dict] = None) -> List[TemplateFunction]:
    """
    Parse a SAM template string and return its Lambda functions in declaration order.

    Args:
        content: SAM template YAML (or JSON) string
        parameters: parameter overrides; template Parameters defaults fill the rest

    Raises:
        yaml.YAMLError: the template is not valid YAML (including duplicate keys)
        ValueError: the template is not a mapping
    """
    data = yaml.load(content, Loader=CfnLoader)
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ValueError("template root must be a mapping")

    resolved_params = _parameter_defaults(data.get("Parameters"))
    resolved_params.update({k: str(v) for k, v in (parameters or {}).items()})

    # Get default values from Globals.
    globals_config = _as_dict(_as_dict(data.get("Globals")).get("Function"))
    default_env = _as_dict(_as_dict(globals_config.get("Environment")).get("Variables"))

    functions = []
    resources = _as_dict(data.get("Resources"))

    for logical_id, resource in resources.items():
        resource = _as_dict(resource)
        resource_type = resource.get("Type", "")

        if resource_type not in FUNCTION_TYPES:
            continue

        props = _as_dict(resource.get("Properties"))

        # Globals apply to serverless functions only.
        if resource_type == SERVERLESS_FUNCTION:
            handler = props.get("Handler", globals_config.get("Handler"))
            runtime = props.get("Runtime", globals_config.get("Runtime"))
            code_uri = props.get("CodeUri", globals_config.get("CodeUri"))
            env_vars = dict(default_env)
        else:
            handler = props.get("Handler")
            runtime = props.get("Runtime")
            code_uri = None
            env_vars = {}

        env_vars.update(_as_dict(_as_dict(props.get("Environment")).get("Variables")))
        resolved_env = {}
        for key, value in env_vars.items():
            resolved = _resolve_intrinsic(value, resolved_params)
            if resolved is not None:
                resolved_env[str(key)] = resolved

        functions.append(
            TemplateFunction(
                logical_id=str(logical_id),
                resource_type=resource_type,
                handler=_resolve_intrinsic(handler, resolved_params),
                runtime=_resolve_intrinsic(runtime, resolved_params),
                code_uri=_resolve_intrinsic(code_uri, resolved_params),
                environment=resolved_env,
            )
        )

    return functions


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _parameter_defaults(parameters: Any) -> Dict[str, str]:
    defaults = {}
    for name, definition in _as_dict(parameters).items():
        definition = _as_dict(definition)
        if "Default" in definition and definition["Default"] is not None:
            defaults[str(name)] = str(definition["Default"])
    return defaults


def _resolve_intrinsic(value: Any, parameters: dict) -> Optional[str]:
    """
    Resolve a CloudFormation value to a string.

    Supports plain scalars, `Ref` to parameters and `Fn::Sub` with ${Param} references.
    Anything else resolves to None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return _substitute(value, parameters)
    if isinstance(value, dict) and len(value) == 1:
        if "Ref" in value:
            return parameters.get(str(value["Ref"]))
        if "Fn::Sub" in value:
            sub = value["Fn::Sub"]
            if isinstance(sub, list) and sub:
                variables = dict(parameters)
                if len(sub) > 1:
                    for k, v in _as_dict(sub[1]).items():
                        resolved = _resolve_intrinsic(v, parameters)
                        if resolved is not None:
                            variables[str(k)] = resolved
                return _substitute(str(sub[0]), variables)
            if isinstance(sub, str):
                return _substitute(sub, parameters)
    return None


def _substitute(value: str, parameters: dict) -> str:
    def replace_param(match):
        param_name = match.group(1)
        return parameters.get(param_name, f"${{{param_name}}}")

    return _PARAM_PATTERN.sub(replace_param, value)


class SamTemplateStore:
    """TemplateStore reading templates from the filesystem."""

    def __init__(self, parameters: Optional[dict] = None):
        self.parameters = dict(parameters or {})

    def find_functions(self, template_path: Union[str, Path]) -> List[TemplateFunction]:
        path = Path(template_path)
        try:
            with open(path, encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(str(template_path), str(e)) from e

        try:
            functions = parse_sam_template(content, self.parameters)
        except (yaml.YAMLError, ValueError) as e:
            raise TemplateError(str(template_path), str(e)) from e

        logger.debug(f"Found {len(functions)} function(s) in {path}")
        return functions
