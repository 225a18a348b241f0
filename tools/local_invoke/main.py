#!/usr/bin/env python3
import argparse
import sys
from pathlib import Path

# Add the project root to sys.path.
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from services.invoker.core.logging_config import setup_logging  # noqa: E402
from services.invoker.core.template import TemplateError  # noqa: E402
from services.invoker.exceptions import (  # noqa: E402
    CollaboratorError,
    InvocationConfigurationError,
    ToolNotConfigured,
)
from tools.local_invoke.commands import check, functions, run, save  # noqa: E402
from tools.local_invoke.core import logging  # noqa: E402


def add_function_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that resolves an invocation."""
    function_group = parser.add_argument_group("function")
    function_group.add_argument("--template", "-t", help="Path to SAM template.yaml")
    function_group.add_argument("--logical-id", "-f", help="Logical id of the function in the template")
    function_group.add_argument("--handler", help="Handler to invoke without a template")
    function_group.add_argument("--runtime", help="Runtime of the handler (e.g. python3.12, go1.x)")
    function_group.add_argument(
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment variable for the function (repeatable)",
    )

    aws_group = parser.add_argument_group("aws")
    aws_group.add_argument("--region", help="Region id (default: DEFAULT_REGION)")
    aws_group.add_argument(
        "--credentials",
        help="Credential profile, as `name` or `profile:name` (default: DEFAULT_CREDENTIAL_PROFILE)",
    )

    input_group = parser.add_argument_group("input")
    events = input_group.add_mutually_exclusive_group()
    events.add_argument("--event", "-e", help="Inline event JSON")
    events.add_argument("--event-file", help="Path to an event JSON file")


def main():
    parser = argparse.ArgumentParser(
        description="SAM Local Invoke CLI", formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--project-dir", "-C", type=str, help="Project root (default: current directory)"
    )
    parser.add_argument(
        "--source-root",
        action="append",
        default=[],
        help="Additional source root searched for handlers (repeatable)",
    )
    parser.add_argument("--config", "-c", type=str, help="Saved run configuration (YAML)")
    parser.add_argument(
        "--parameter",
        "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template parameter override (repeatable)",
    )
    parser.add_argument(
        "--log-format", choices=["plain", "json"], default="plain", help="Diagnostic log format"
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to execute")

    # --- check command ---
    check_parser = subparsers.add_parser("check", help="Validate the invocation without running it")
    add_function_arguments(check_parser)

    # --- run command ---
    run_parser = subparsers.add_parser("run", help="Invoke the function with `sam local invoke`")
    add_function_arguments(run_parser)

    # --- functions command ---
    functions_parser = subparsers.add_parser("functions", help="List functions in a template")
    functions_parser.add_argument(
        "--template", "-t", required=True, help="Path to SAM template.yaml"
    )

    # --- save command ---
    save_parser = subparsers.add_parser("save", help="Save the run configuration to YAML")
    add_function_arguments(save_parser)
    save_parser.add_argument("--output", "-o", required=True, help="Destination YAML file")

    args = parser.parse_args()

    setup_logging(args.log_format)

    try:
        if args.command == "check":
            check.run(args)
        elif args.command == "run":
            run.run(args)
        elif args.command == "functions":
            functions.run(args)
        elif args.command == "save":
            save.run(args)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(0)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except ToolNotConfigured as e:
        logging.error("SAM CLI executable is not configured")
        logging.hint(e.hint)
        sys.exit(1)
    except (InvocationConfigurationError, TemplateError) as e:
        logging.error(str(e))
        sys.exit(1)
    except CollaboratorError as e:
        logging.error(str(e))
        sys.exit(2)


if __name__ == "__main__":
    main()
