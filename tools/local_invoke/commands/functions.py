"""
sam-local-invoke functions - List the functions declared in a template.

Each function is shown with its runtime, handler and code location, followed by
the environment variables it gets from the template (Globals included).

Usage:
    sam-local-invoke functions --template template.yaml
"""
from pathlib import Path

from tools.local_invoke.core import context, logging


def run(args):
    project = context.build_project(args)
    store = context.build_template_store(args)

    path = Path(args.template)
    if not path.is_absolute():
        path = project.root / path

    functions = store.find_functions(path)
    if not functions:
        logging.warning(f"No functions found in {args.template}")
        return []

    logging.info(f"Functions in {args.template}:")
    for function in functions:
        print(
            f"  {logging.highlight(function.logical_id):<24} "
            f"{function.runtime or '-':<16} {function.handler or '-':<32} "
            f"{function.code_uri or '.'}"
        )
        for key, value in sorted(function.environment.items()):
            print(f"      {key}={value}")
    return functions
