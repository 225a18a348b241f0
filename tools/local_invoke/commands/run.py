"""
sam-local-invoke run - Invoke a function locally through the SAM CLI.

Usage:
    sam-local-invoke run [options]

Examples:
    sam-local-invoke run --template template.yaml --logical-id MyFunc --event-file event.json
    sam-local-invoke run --handler main.Handle --runtime go1.x --event '{"name": "x"}'
"""
import sys

from services.invoker.core.collaborators import InvocationExecutor
from services.invoker.services import SamCliExecutor, SamCliLocator
from tools.local_invoke.core import context, logging


def run(args):
    """
    Validate the run configuration, then launch `sam local invoke`.
    Exits with the SAM CLI return code.
    """
    project = context.build_project(args)
    run_config = context.build_run_configuration(args, project)
    resolver = context.build_resolver(args)

    spec = resolver.build(run_config, project)

    executor: InvocationExecutor = SamCliExecutor(SamCliLocator())
    logging.info(f"Invoking {logging.highlight(spec.handler)} ({spec.runtime}) in {spec.region.id}")
    invocation = executor.invoke(spec)

    try:
        # Wait directly to allow interruption with Ctrl+C.
        returncode = invocation.wait()
    except KeyboardInterrupt:
        invocation.process.terminate()
        invocation.wait()
        print()  # Newline.
        sys.exit(130)

    if returncode == 0:
        logging.success("Invocation finished")
    else:
        logging.error(f"SAM CLI exited with code {returncode}")
    sys.exit(returncode)
