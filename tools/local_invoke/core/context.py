# Where: tools/local_invoke/core/context.py
# What: Build the run configuration and resolver from CLI arguments.
# Why: Keep flag handling out of the command implementations.

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

import questionary

from services.invoker.config import config as settings
from services.invoker.core.project import Project
from services.invoker.core.resolver import InvocationSpecResolver
from services.invoker.core.template import SamTemplateStore, TemplateError, TemplateFunction
from services.invoker.models.run_configuration import RunConfiguration
from services.invoker.services import (
    Boto3CredentialProvider,
    BotocoreRegionCatalog,
    SamCliLocator,
)
from tools.local_invoke.core import logging


def parse_key_values(items: Optional[List[str]], option: str) -> Dict[str, str]:
    """Parse repeated KEY=VALUE options."""
    result: Dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got '{item}'")
        result[key.strip()] = value
    return result


def build_project(args: argparse.Namespace) -> Project:
    root = Path(getattr(args, "project_dir", None) or Path.cwd())
    return Project.at(root, getattr(args, "source_root", None))


def build_template_store(args: argparse.Namespace) -> SamTemplateStore:
    return SamTemplateStore(parse_key_values(getattr(args, "parameter", None), "--parameter"))


def build_resolver(args: argparse.Namespace) -> InvocationSpecResolver:
    return InvocationSpecResolver(
        template_store=build_template_store(args),
        credential_provider=Boto3CredentialProvider(),
        region_catalog=BotocoreRegionCatalog(),
        tool_locator=SamCliLocator(),
    )


def build_run_configuration(
    args: argparse.Namespace, project: Project, interactive: bool = True
) -> RunConfiguration:
    """
    Load the saved run configuration (if any) and apply command-line overrides.

    Explicit flags win over the saved file; settings defaults fill region and credentials.
    """
    config_path = getattr(args, "config", None)
    run_config = RunConfiguration.load(config_path) if config_path else RunConfiguration()

    options = run_config.function_options
    template = getattr(args, "template", None)
    logical_id = getattr(args, "logical_id", None)
    handler = getattr(args, "handler", None)
    runtime = getattr(args, "runtime", None)

    # A partial override keeps the saved values of the same mode.
    if template:
        saved_id = options.logical_id if run_config.is_using_template() else None
        run_config.use_template(template, logical_id or saved_id)
    elif handler or runtime:
        if run_config.is_using_template():
            run_config.use_handler(runtime, handler)
        else:
            run_config.use_handler(runtime or options.runtime, handler or options.handler)
    elif logical_id and run_config.is_using_template():
        options.logical_id = logical_id

    if interactive and options.use_template and options.template_file and not options.logical_id:
        options.logical_id = select_function(build_template_store(args), project, options.template_file)

    options.environment_variables.update(parse_key_values(getattr(args, "env", None), "--env"))

    run_config.region_id = (
        getattr(args, "region", None) or run_config.region_id or settings.DEFAULT_REGION or None
    )
    run_config.credential_provider_id = (
        getattr(args, "credentials", None)
        or run_config.credential_provider_id
        or settings.DEFAULT_CREDENTIAL_PROFILE
        or None
    )

    if getattr(args, "event_file", None):
        run_config.use_input_file(args.event_file)
    elif getattr(args, "event", None) is not None:
        run_config.use_input_text(args.event)

    return run_config


def select_function(
    store: SamTemplateStore, project: Project, template_file: str
) -> Optional[str]:
    """
    Prompt the user to pick a function from the template.
    Returns None when the template cannot be read so validation reports the real error.
    """
    path = Path(template_file)
    if not path.is_absolute():
        path = project.root / path
    try:
        functions: List[TemplateFunction] = store.find_functions(path)
    except TemplateError:
        return None

    if not functions:
        return None
    if len(functions) == 1:
        # Auto-select if only one function exists
        return functions[0].logical_id
    if not sys.stdin.isatty():
        return None

    selected = questionary.select(
        "Select a function:", choices=[f.logical_id for f in functions]
    ).ask()

    if selected is None:
        logging.warning("Aborted.")
        sys.exit(0)

    return selected
