import os
import textwrap
from pathlib import Path
from typing import Dict, Optional

import pytest

# Config is initialized at import time, so set environment variables at the top level.
os.environ["SAM_CLI_PATH"] = ""
os.environ["DEFAULT_REGION"] = ""
os.environ["DEFAULT_CREDENTIAL_PROFILE"] = ""
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from services.invoker.core.project import Project  # noqa: E402
from services.invoker.core.resolver import InvocationSpecResolver  # noqa: E402
from services.invoker.core.template import SamTemplateStore  # noqa: E402
from services.invoker.exceptions import CredentialProviderNotFound  # noqa: E402
from services.invoker.handlers.registry import HandlerResolverRegistry  # noqa: E402
from services.invoker.models.spec import AwsCredentials, Region  # noqa: E402

TEMPLATE = """\
AWSTemplateFormatVersion: '2010-09-09'
Transform: AWS::Serverless-2016-10-31
Resources:
  MyFunc:
    Type: AWS::Serverless::Function
    Properties:
      Handler: app.handler
      Runtime: python3.9
      CodeUri: .
"""

APP_SOURCE = """\
import json


def handler(event, context):
    return {"statusCode": 200, "body": json.dumps(event)}
"""


class FakeLocator:
    def __init__(self, path: Optional[str] = "/usr/local/bin/sam"):
        self.path = path
        self.calls = 0

    def executable_path(self) -> Optional[str]:
        self.calls += 1
        return self.path


class FakeCredentialProvider:
    def __init__(self, known: Optional[Dict[str, AwsCredentials]] = None):
        self.known = known if known is not None else {"default": make_credentials("default")}
        self.calls = []

    def resolve(self, provider_id: str) -> AwsCredentials:
        self.calls.append(provider_id)
        if provider_id not in self.known:
            raise CredentialProviderNotFound(provider_id)
        return self.known[provider_id]


class FakeRegionCatalog:
    def __init__(self, regions=("us-east-1", "eu-west-1")):
        self.regions = {r: Region(id=r, name=r) for r in regions}
        self.calls = []

    def lookup_by_id(self, region_id: str) -> Optional[Region]:
        self.calls.append(region_id)
        return self.regions.get(region_id)


def make_credentials(provider_id: str) -> AwsCredentials:
    return AwsCredentials(
        provider_id=provider_id,
        access_key_id="AKIDEXAMPLE",
        secret_access_key="secret",
    )


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    return write


@pytest.fixture
def project_dir(tmp_path):
    write(tmp_path / "template.yaml", TEMPLATE)
    write(tmp_path / "app.py", APP_SOURCE)
    return tmp_path


@pytest.fixture
def project(project_dir):
    return Project.at(project_dir)


@pytest.fixture
def locator():
    return FakeLocator()


@pytest.fixture
def credential_provider():
    return FakeCredentialProvider()


@pytest.fixture
def region_catalog():
    return FakeRegionCatalog()


@pytest.fixture
def resolver(locator, credential_provider, region_catalog):
    return InvocationSpecResolver(
        template_store=SamTemplateStore(),
        credential_provider=credential_provider,
        region_catalog=region_catalog,
        tool_locator=locator,
        handler_registry=HandlerResolverRegistry.create_default(load_plugins=False),
    )


@pytest.fixture
def make_credentials_for():
    return make_credentials
