"""
Custom exception classes.

Represent configuration errors found while resolving a local invocation.
Every subclass of InvocationConfigurationError is fixable by the user;
CollaboratorError wraps unexpected failures from external services.
"""

from typing import Optional


class InvocationConfigurationError(Exception):
    """Base exception for run configurations that cannot be invoked."""

    pass


class ToolNotConfigured(InvocationConfigurationError):
    """Raised when no local invocation executable is configured or found."""

    def __init__(self, hint: str = "Set SAM_CLI_PATH in the environment or .env file"):
        self.hint = hint
        super().__init__(f"SAM CLI executable is not configured. {hint}")


class NoTemplateSpecified(InvocationConfigurationError):
    def __init__(self):
        super().__init__("No template file specified")


class NoFunctionSpecified(InvocationConfigurationError):
    def __init__(self):
        super().__init__("No function specified from the template")


class NoSuchFunction(InvocationConfigurationError):
    """Raised when the template has no function with the requested logical id."""

    def __init__(self, logical_id: str, template_path: str):
        self.logical_id = logical_id
        self.template_path = template_path
        super().__init__(f"Function '{logical_id}' not found in template {template_path}")


class DuplicateFunction(InvocationConfigurationError):
    """Raised when more than one function in the template shares the logical id."""

    def __init__(self, logical_id: str, template_path: str):
        self.logical_id = logical_id
        self.template_path = template_path
        super().__init__(
            f"Function '{logical_id}' is declared more than once in template {template_path}"
        )


class InvalidTemplate(InvocationConfigurationError):
    """Raised when the template cannot be read or parsed."""

    def __init__(self, template_path: str, reason: str):
        self.template_path = template_path
        self.reason = reason
        super().__init__(f"Unable to read template {template_path}: {reason}")


class NoRuntimeSpecified(InvocationConfigurationError):
    def __init__(self, runtime: Optional[str] = None):
        self.runtime = runtime
        if runtime:
            super().__init__(f"Runtime '{runtime}' is not a supported runtime")
        else:
            super().__init__("No runtime specified")


class NoHandlerSpecified(InvocationConfigurationError):
    def __init__(self):
        super().__init__("No handler specified")


class HandlerNotFound(InvocationConfigurationError):
    def __init__(self, handler: str):
        self.handler = handler
        super().__init__(f"Cannot find handler '{handler}' in project")


class NoRegionSpecified(InvocationConfigurationError):
    def __init__(self, region_id: Optional[str] = None):
        self.region_id = region_id
        if region_id:
            super().__init__(f"Region '{region_id}' is not a known region")
        else:
            super().__init__("No region specified")


class CredentialsNotFound(InvocationConfigurationError):
    def __init__(self, provider_id: Optional[str]):
        self.provider_id = provider_id
        if provider_id:
            super().__init__(f"Credential profile '{provider_id}' not found")
        else:
            super().__init__("No credentials specified")


class InputUnresolvable(InvocationConfigurationError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Unable to resolve input: {reason}")


class CredentialProviderNotFound(Exception):
    """Signal raised by credential providers for an unknown provider id."""

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"No credential provider found for '{provider_id}'")


class CollaboratorError(Exception):
    """Unexpected failure raised by an external collaborator."""

    def __init__(self, collaborator: str, cause: Exception):
        self.collaborator = collaborator
        self.cause = cause
        super().__init__(f"{collaborator} failed: {cause}")
