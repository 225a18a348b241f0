"""
Invocation Spec Resolver

Turns a function reference plus region, credentials and input settings into a
validated InvocationSpec, or raises the InvocationConfigurationError describing
what the user has to fix.

Validation order is fixed; each step fails fast:
    0. local invocation executable configured
    1. function reference resolved (template lookup or direct handler)
    2. handler source located
    3. region selected
    4. credentials resolved
    5. input resolved
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import TypeAdapter, ValidationError

from ..exceptions import (
    CollaboratorError,
    CredentialProviderNotFound,
    CredentialsNotFound,
    DuplicateFunction,
    HandlerNotFound,
    InputUnresolvable,
    InvalidTemplate,
    NoFunctionSpecified,
    NoHandlerSpecified,
    NoRegionSpecified,
    NoRuntimeSpecified,
    NoSuchFunction,
    NoTemplateSpecified,
    ToolNotConfigured,
)
from ..handlers.registry import HandlerResolverRegistry
from ..models.reference import (
    DirectReference,
    FilePath,
    FunctionReference,
    InlineText,
    InputSource,
    TemplateReference,
)
from ..models.run_configuration import RunConfiguration
from ..models.spec import (
    AwsCredentials,
    HandlerLocation,
    InvocationSpec,
    Region,
    ResolvedFunction,
    TemplateDetails,
)
from .collaborators import CredentialProvider, ExecutableLocator, RegionCatalog, TemplateStore
from .project import Project
from .runtimes import Runtime
from .template import TemplateError

logger = logging.getLogger("invoker.resolver")

_reference_adapter = TypeAdapter(FunctionReference)
_input_adapter = TypeAdapter(InputSource)

TOOL_HINT = "Set SAM_CLI_PATH in the environment or .env file, or install `sam` on PATH"


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _coerce_reference(ref):
    if not isinstance(ref, dict):
        return ref
    try:
        return _reference_adapter.validate_python(ref)
    except ValidationError as e:
        logger.debug(f"Unrecognized function reference: {e}")
        if ref.get("kind") == "handler":
            raise NoHandlerSpecified() from e
        raise NoTemplateSpecified() from e


def _coerce_input_source(source):
    if not isinstance(source, dict):
        return source
    try:
        return _input_adapter.validate_python(source)
    except ValidationError as e:
        raise InputUnresolvable(f"unrecognized input source kind {source.get('kind')!r}") from e


class InvocationSpecResolver:
    def __init__(
        self,
        template_store: TemplateStore,
        credential_provider: CredentialProvider,
        region_catalog: RegionCatalog,
        tool_locator: ExecutableLocator,
        handler_registry: Optional[HandlerResolverRegistry] = None,
    ):
        """
        Args:
            template_store: reads functions declared in templates
            credential_provider: resolves credential provider ids
            region_catalog: resolves region ids
            tool_locator: reports the configured local invocation executable
            handler_registry: handler resolver strategies per runtime group
        """
        self.template_store = template_store
        self.credential_provider = credential_provider
        self.region_catalog = region_catalog
        self.tool_locator = tool_locator
        self.handler_registry = handler_registry or HandlerResolverRegistry.create_default()

    # ------------------------------------------------------------------
    # Function resolution
    # ------------------------------------------------------------------

    def resolve_function(
        self, ref: Union[TemplateReference, DirectReference, dict], project: Project
    ) -> ResolvedFunction:
        ref = _coerce_reference(ref)
        if isinstance(ref, TemplateReference):
            return self._resolve_template_function(ref, project)
        return self._resolve_direct_function(ref)

    def _resolve_template_function(
        self, ref: TemplateReference, project: Project
    ) -> ResolvedFunction:
        if _blank(ref.template_path):
            raise NoTemplateSpecified()
        if _blank(ref.logical_id):
            raise NoFunctionSpecified()

        template_path = ref.template_path
        path = Path(template_path)
        if not path.is_absolute():
            path = project.root / path

        try:
            functions = self.template_store.find_functions(path)
        except TemplateError as e:
            raise InvalidTemplate(template_path, e.reason) from e
        except Exception as e:
            raise CollaboratorError("TemplateStore", e) from e

        matches = [f for f in functions if f.logical_id == ref.logical_id]
        if not matches:
            raise NoSuchFunction(ref.logical_id, template_path)
        if len(matches) > 1:
            raise DuplicateFunction(ref.logical_id, template_path)
        function = matches[0]

        runtime = Runtime.from_value(function.runtime)
        if runtime is None:
            raise NoRuntimeSpecified(function.runtime)
        if _blank(function.handler):
            raise NoHandlerSpecified()

        return ResolvedFunction(
            handler=function.handler,
            runtime=runtime,
            template_details=TemplateDetails(template_path=str(path), logical_id=ref.logical_id),
        )

    def _resolve_direct_function(self, ref: DirectReference) -> ResolvedFunction:
        if _blank(ref.handler):
            raise NoHandlerSpecified()
        runtime = Runtime.from_value(ref.runtime)
        if runtime is None:
            raise NoRuntimeSpecified(ref.runtime)
        return ResolvedFunction(handler=ref.handler, runtime=runtime)

    # ------------------------------------------------------------------
    # Handler source lookup
    # ------------------------------------------------------------------

    def locate_handler_source(
        self, resolved: ResolvedFunction, project: Project
    ) -> Optional[HandlerLocation]:
        """
        First source location of the handler, or None.

        Lookup failures inside a strategy are reported as "not found".
        """
        strategy = self.handler_registry.for_runtime(resolved.runtime)
        if strategy is None:
            logger.debug(f"No handler resolver registered for runtime {resolved.runtime}")
            return None
        try:
            locations = strategy.find_source_locations(project, resolved.runtime, resolved.handler)
        except Exception:
            logger.debug(
                f"Handler lookup failed for '{resolved.handler}'",
                exc_info=True,
                extra={"handler": resolved.handler, "runtime": str(resolved.runtime)},
            )
            return None
        return locations[0] if locations else None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        ref: Union[TemplateReference, DirectReference, dict],
        region_id: Optional[str],
        credentials_id: Optional[str],
        input_source: Union[InlineText, FilePath, dict],
        project: Project,
        environment_variables: Optional[Dict[str, str]] = None,
    ) -> InvocationSpec:
        self._check_tool_configured()

        resolved = self.resolve_function(ref, project)

        location = self.locate_handler_source(resolved, project)
        if location is None:
            raise HandlerNotFound(resolved.handler)

        region = self._resolve_region(region_id)
        credentials = self._resolve_credentials(credentials_id)

        input_text, input_file = self._resolve_input(_coerce_input_source(input_source), project)

        spec = InvocationSpec(
            runtime=resolved.runtime,
            handler=resolved.handler,
            input_text=input_text,
            input_file=input_file,
            environment_variables={
                str(k): str(v) for k, v in (environment_variables or {}).items()
            },
            credentials=credentials,
            region=region,
            handler_location=location,
            template_details=resolved.template_details,
        )
        logger.info(
            f"Resolved invocation of {spec.handler} ({spec.runtime}) in {region.id}",
            extra={"handler": spec.handler, "runtime": str(spec.runtime), "region": region.id},
        )
        return spec

    def check(self, configuration: RunConfiguration, project: Project) -> None:
        """Validate a run configuration without keeping the resulting spec."""
        self.build(configuration, project)

    def build(self, configuration: RunConfiguration, project: Project) -> InvocationSpec:
        return self.validate(
            configuration.function_reference(),
            configuration.region_id,
            configuration.credential_provider_id,
            configuration.input_source(),
            project,
            configuration.function_options.environment_variables,
        )

    def handler_display_name(self, configuration: RunConfiguration) -> Optional[str]:
        handler = configuration.function_options.handler
        if handler is None:
            return None
        strategy = self.handler_registry.for_runtime(
            Runtime.from_value(configuration.function_options.runtime)
        )
        return strategy.handler_display_name(handler) if strategy else handler

    def suggested_name(self, configuration: RunConfiguration) -> Optional[str]:
        return configuration.suggested_name(self.handler_display_name(configuration))

    def _check_tool_configured(self) -> None:
        try:
            executable = self.tool_locator.executable_path()
        except Exception as e:
            raise CollaboratorError("ExecutableLocator", e) from e
        if _blank(executable):
            raise ToolNotConfigured(TOOL_HINT)

    def _resolve_region(self, region_id: Optional[str]) -> Region:
        if _blank(region_id):
            raise NoRegionSpecified()
        try:
            region = self.region_catalog.lookup_by_id(region_id)
        except Exception as e:
            raise CollaboratorError("RegionCatalog", e) from e
        if region is None:
            raise NoRegionSpecified(region_id)
        return region

    def _resolve_credentials(self, credentials_id: Optional[str]) -> AwsCredentials:
        if _blank(credentials_id):
            raise CredentialsNotFound(None)
        try:
            credentials = self.credential_provider.resolve(credentials_id)
        except CredentialProviderNotFound as e:
            raise CredentialsNotFound(credentials_id) from e
        except Exception as e:
            raise CollaboratorError("CredentialProvider", e) from e
        if credentials is None:
            raise CredentialsNotFound(credentials_id)
        return credentials

    def _resolve_input(self, source: Union[InlineText, FilePath], project: Project) -> tuple:
        if isinstance(source, InlineText):
            if source.text is None:
                raise InputUnresolvable("no input specified")
            return source.text, None

        if _blank(source.path):
            raise InputUnresolvable("no input file specified")
        path = Path(source.path).expanduser()
        if not path.is_absolute():
            path = project.root / path
        if not path.exists():
            raise InputUnresolvable(f"input file {source.path} does not exist")
        if not path.is_file():
            raise InputUnresolvable(f"input file {source.path} is not a file")
        if not os.access(path, os.R_OK):
            raise InputUnresolvable(f"input file {source.path} is not readable")
        return None, path
