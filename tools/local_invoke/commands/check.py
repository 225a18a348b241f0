"""
sam-local-invoke check - Validate a local invocation without running it.

Usage:
    sam-local-invoke check [options]

Examples:
    sam-local-invoke check --template template.yaml --logical-id MyFunc --region us-east-1
    sam-local-invoke check --handler app.handler --runtime python3.12 --event '{}'
"""
from tools.local_invoke.core import context, logging


def run(args):
    """
    Resolve the run configuration and print the resulting invocation.
    """
    project = context.build_project(args)
    run_config = context.build_run_configuration(args, project)
    resolver = context.build_resolver(args)

    spec = resolver.build(run_config, project)

    name = resolver.suggested_name(run_config)
    if name:
        logging.info(logging.highlight(name))
    logging.field("Runtime", spec.runtime)
    logging.field("Handler", spec.handler)
    logging.field("Source", spec.handler_location)
    if spec.template_details is not None:
        logging.field("Template", spec.template_details.template_path)
        logging.field("Logical ID", spec.template_details.logical_id)
    logging.field("Region", spec.region.id)
    logging.field("Credentials", spec.credentials.provider_id)
    logging.field("Input", spec.input_file if spec.input_file is not None else "<inline>")
    if spec.environment_variables:
        logging.field("Environment", ", ".join(sorted(spec.environment_variables)))
    logging.success("Configuration is valid")
    return spec
