"""
sam-local-invoke save - Persist the current run configuration to YAML.

Usage:
    sam-local-invoke save --output .sam-local/run.yml [options]
"""
from tools.local_invoke.core import context, logging


def run(args):
    project = context.build_project(args)
    run_config = context.build_run_configuration(args, project)
    resolver = context.build_resolver(args)

    if not run_config.name:
        run_config.name = resolver.suggested_name(run_config)

    run_config.save(args.output)
    logging.success(f"Saved run configuration {run_config.name or ''} to {args.output}")
    return run_config
