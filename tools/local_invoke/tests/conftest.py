import os
from argparse import Namespace
from unittest.mock import MagicMock

import pytest

# Config is initialized at import time, so set environment variables at the top level.
os.environ["SAM_CLI_PATH"] = ""
os.environ["DEFAULT_REGION"] = ""
os.environ["DEFAULT_CREDENTIAL_PROFILE"] = ""

from services.invoker.models import AwsCredentials  # noqa: E402
from tools.local_invoke.core import context  # noqa: E402

TEMPLATE = """\
Globals:
  Function:
    Environment:
      Variables:
        STAGE: local
Resources:
  MyFunc:
    Type: AWS::Serverless::Function
    Properties:
      Handler: app.handler
      Runtime: python3.9
  Worker:
    Type: AWS::Serverless::Function
    Properties:
      Handler: worker.run
      Runtime: python3.12
      CodeUri: workers/
      Environment:
        Variables:
          QUEUE: jobs
"""

APP_SOURCE = "def handler(event, context):\n    return event\n"


@pytest.fixture
def project_dir(tmp_path):
    (tmp_path / "template.yaml").write_text(TEMPLATE, encoding="utf-8")
    (tmp_path / "app.py").write_text(APP_SOURCE, encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_args(project_dir):
    def factory(**kwargs):
        values = dict(
            project_dir=str(project_dir),
            source_root=[],
            config=None,
            parameter=[],
            template=None,
            logical_id=None,
            handler=None,
            runtime=None,
            env=[],
            region=None,
            credentials=None,
            event=None,
            event_file=None,
        )
        values.update(kwargs)
        return Namespace(**values)

    return factory


@pytest.fixture
def fake_aws(monkeypatch):
    """Replace the boto3 credential provider and the SAM CLI locator."""
    credential_provider = MagicMock()
    credential_provider.resolve.side_effect = lambda provider_id: AwsCredentials(
        provider_id=provider_id, access_key_id="AKID", secret_access_key="secret"
    )
    locator = MagicMock()
    locator.executable_path.return_value = "/usr/local/bin/sam"

    monkeypatch.setattr(context, "Boto3CredentialProvider", lambda: credential_provider)
    monkeypatch.setattr(context, "SamCliLocator", lambda: locator)
    return credential_provider, locator
