"""
SAM CLI execution service.

Locates the `sam` executable and launches `sam local invoke` for a validated
InvocationSpec. Direct-handler specs get a generated one-function template.
"""

import json
import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..config import config
from ..exceptions import ToolNotConfigured
from ..models.spec import InvocationSpec

logger = logging.getLogger("invoker.sam_cli")

GENERATED_LOGICAL_ID = "Function"
DEFAULT_TIMEOUT = 900


class SamCliLocator:
    def __init__(self, configured_path: Optional[str] = None):
        self.configured_path = configured_path

    def executable_path(self) -> Optional[str]:
        path = self.configured_path if self.configured_path is not None else config.SAM_CLI_PATH
        if path:
            if Path(path).is_file():
                return str(path)
            return shutil.which(path)
        return shutil.which("sam")


@dataclass
class RunningInvocation:
    process: subprocess.Popen
    command: List[str]
    workdir: Path

    def wait(self, timeout: Optional[float] = None) -> int:
        try:
            return self.process.wait(timeout=timeout)
        finally:
            if self.process.poll() is not None:
                shutil.rmtree(self.workdir, ignore_errors=True)


class SamCliExecutor:
    def __init__(self, locator: Optional[SamCliLocator] = None):
        self.locator = locator or SamCliLocator()

    def build_command(self, spec: InvocationSpec, workdir: Path) -> List[str]:
        """
        Write the event, env-vars and (for direct handlers) template files into
        `workdir` and return the `sam local invoke` command line.
        """
        executable = self.locator.executable_path()
        if not executable:
            raise ToolNotConfigured()

        if spec.template_details is not None:
            template_path = str(Path(spec.template_details.template_path).resolve())
            logical_id = spec.template_details.logical_id
        else:
            template_path = str(self._write_template(spec, workdir))
            logical_id = GENERATED_LOGICAL_ID

        event_path = workdir / "event.json"
        event_path.write_text(spec.read_input(), encoding="utf-8")

        cmd = [
            executable,
            "local",
            "invoke",
            logical_id,
            "--template",
            template_path,
            "--event",
            str(event_path),
            "--region",
            spec.region.id,
        ]

        if spec.environment_variables:
            env_path = workdir / "env-vars.json"
            with open(env_path, "w", encoding="utf-8") as f:
                json.dump({logical_id: spec.environment_variables}, f, indent=2)
            cmd.extend(["--env-vars", str(env_path)])

        return cmd

    def build_environment(self, spec: InvocationSpec) -> Dict[str, str]:
        env = os.environ.copy()
        env.update(spec.credentials.to_environment())
        if spec.credentials.session_token is None:
            env.pop("AWS_SESSION_TOKEN", None)
        env["AWS_REGION"] = spec.region.id
        env["AWS_DEFAULT_REGION"] = spec.region.id
        return env

    def invoke(self, spec: InvocationSpec, **popen_kwargs) -> RunningInvocation:
        workdir = Path(tempfile.mkdtemp(prefix="sam-local-invoke-"))
        try:
            cmd = self.build_command(spec, workdir)
            logger.info(
                f"Invoking {spec.handler} with SAM CLI",
                extra={"command": " ".join(cmd), "region": spec.region.id},
            )
            process = subprocess.Popen(cmd, env=self.build_environment(spec), **popen_kwargs)
        except Exception:
            shutil.rmtree(workdir, ignore_errors=True)
            raise
        return RunningInvocation(process=process, command=cmd, workdir=workdir)

    def _write_template(self, spec: InvocationSpec, workdir: Path) -> Path:
        location = spec.handler_location
        code_uri = location.source_root or Path(location.path).parent
        template = {
            "AWSTemplateFormatVersion": "2010-09-09",
            "Transform": "AWS::Serverless-2016-10-31",
            "Resources": {
                GENERATED_LOGICAL_ID: {
                    "Type": "AWS::Serverless::Function",
                    "Properties": {
                        "Handler": spec.handler,
                        "Runtime": str(spec.runtime),
                        "CodeUri": str(Path(code_uri).resolve()),
                        "Timeout": DEFAULT_TIMEOUT,
                    },
                }
            },
        }
        template_path = workdir / "template.yaml"
        with open(template_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(template, f, sort_keys=False)
        return template_path
