"""
Services package.

Provides the concrete collaborators: credentials, regions and the SAM CLI.
"""

from .credentials import Boto3CredentialProvider
from .regions import BotocoreRegionCatalog
from .sam_cli import RunningInvocation, SamCliExecutor, SamCliLocator

__all__ = [
    "Boto3CredentialProvider",
    "BotocoreRegionCatalog",
    "RunningInvocation",
    "SamCliExecutor",
    "SamCliLocator",
]
