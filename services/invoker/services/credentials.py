"""
Credential provider backed by boto3 profiles.

Provider ids are `profile:<name>` or a bare profile name.
"""

import logging
from typing import Callable

import boto3
from botocore.exceptions import BotoCoreError, ProfileNotFound

from ..exceptions import CredentialProviderNotFound
from ..models.spec import AwsCredentials

logger = logging.getLogger("invoker.credentials")

PROFILE_PREFIX = "profile:"


def profile_name(provider_id: str) -> str:
    if provider_id.startswith(PROFILE_PREFIX):
        return provider_id[len(PROFILE_PREFIX):]
    return provider_id


class Boto3CredentialProvider:
    def __init__(self, session_factory: Callable[..., boto3.session.Session] = boto3.session.Session):
        self.session_factory = session_factory

    def resolve(self, provider_id: str) -> AwsCredentials:
        profile = profile_name(provider_id)
        try:
            session = self.session_factory(profile_name=profile)
            credentials = session.get_credentials()
        except ProfileNotFound as e:
            raise CredentialProviderNotFound(provider_id) from e
        except BotoCoreError as e:
            logger.warning(f"Failed to load credentials for {provider_id}: {e}")
            raise CredentialProviderNotFound(provider_id) from e

        if credentials is None:
            raise CredentialProviderNotFound(provider_id)

        frozen = credentials.get_frozen_credentials()
        return AwsCredentials(
            provider_id=provider_id,
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
        )
