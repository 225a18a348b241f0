"""
Invoker configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from pathlib import Path
from typing import List

from pydantic import Field
from services.common.core.config import BaseAppConfig

DEFAULT_LOG_CONFIG_PATH = str(Path(__file__).parent / "logging.yml")


class InvokerConfig(BaseAppConfig):
    """
    Configuration management for local invocation.
    """

    LOG_CONFIG_PATH: str = Field(
        default=DEFAULT_LOG_CONFIG_PATH, description="Path to the logging YAML config"
    )

    # Local invocation tool
    SAM_CLI_PATH: str = Field(
        default="", description="Path to the SAM CLI executable (empty: look up `sam` on PATH)"
    )

    # Defaults applied by the command-line adapter when flags are omitted
    DEFAULT_REGION: str = Field(default="", description="Region id used when none is selected")
    DEFAULT_CREDENTIAL_PROFILE: str = Field(
        default="", description="Credential provider id used when none is selected"
    )

    # Handler source lookup
    HANDLER_SEARCH_EXCLUDES: List[str] = Field(
        default_factory=lambda: [
            ".git",
            ".aws-sam",
            ".venv",
            "venv",
            "node_modules",
            "__pycache__",
        ],
        description="Directory names skipped while searching for handler sources",
    )


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = InvokerConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
