"""
Where: services/invoker/core/collaborators.py
What: Interfaces of the external services the resolver consumes.
Why: Keep the resolver independent of boto3, the filesystem and the SAM CLI.
"""

from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

from ..models.spec import AwsCredentials, InvocationSpec, Region
from .template import TemplateFunction


class TemplateStore(Protocol):
    def find_functions(self, template_path: Union[str, Path]) -> List[TemplateFunction]:
        """Functions declared in the template; raises TemplateError if it cannot be read."""
        ...


class CredentialProvider(Protocol):
    def resolve(self, provider_id: str) -> AwsCredentials:
        """Credentials for the provider id; raises CredentialProviderNotFound if unknown."""
        ...


class RegionCatalog(Protocol):
    def lookup_by_id(self, region_id: str) -> Optional[Region]: ...


class ExecutableLocator(Protocol):
    def executable_path(self) -> Optional[str]:
        """Path of the local invocation executable, or None if not configured."""
        ...


class InvocationExecutor(Protocol):
    def invoke(self, spec: InvocationSpec) -> Any:
        """Start the invocation and return a handle on the running process."""
        ...
