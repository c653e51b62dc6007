"""
DoiT CLI - Command-line interface for the analytics resources.

This layer provides the user-facing commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Reading request bodies from files or stdin
- JSON output for piping/automation
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

from doit_console.core.client import DoitError
from doit_console.core.types import Attribution, AttributionGroup, Report
from doit_console.sdk import DoitClient, ResourceOperations

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: DoitError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def record_output(record: Any) -> None:
    """Print a record: a short summary on a TTY, the full body otherwise."""
    if is_tty():
        print(f"ID:          {record.id}")
        print(f"Name:        {record.name}")
        if record.description:
            print(f"Description: {record.description}")
        print()
    success_output(record.to_dict())


# =============================================================================
# Input Helpers
# =============================================================================


RECORD_TYPES: dict[str, Any] = {
    "attribution": Attribution,
    "attribution-group": AttributionGroup,
    "report": Report,
}


def read_body(source: str) -> dict[str, Any]:
    """Read a JSON object from a file path or '-' for stdin."""
    try:
        if source == "-":
            data = json.load(sys.stdin)
        else:
            data = json.loads(Path(source).read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise DoitError(f"File not found: {source}")
    except OSError as e:
        raise DoitError(f"Could not read {source}: {e}")
    except UnicodeDecodeError as e:
        raise DoitError(f"{source} is not UTF-8 text: {e}")
    except json.JSONDecodeError as e:
        raise DoitError(f"Invalid JSON in {source}: {e}")
    if not isinstance(data, dict):
        raise DoitError(f"Expected a JSON object in {source}")
    return data


def load_record(kind: str, source: str) -> Any:
    """Build a typed record for the given kind from a JSON body."""
    data = read_body(source)
    # Records built from user input may lack an id
    data.setdefault("id", "")
    try:
        return RECORD_TYPES[kind].from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DoitError(f"Invalid {kind} body in {source}: {e!r}")


def operations_for(client: DoitClient, kind: str) -> ResourceOperations:
    return {
        "attribution": client.attributions,
        "attribution-group": client.attribution_groups,
        "report": client.reports,
    }[kind]


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_get(client: DoitClient, args: argparse.Namespace) -> None:
    """Get a resource by ID."""
    try:
        record = operations_for(client, args.kind).get(args.id)
        record_output(record)
    except DoitError as e:
        error_output(e)


def cmd_create(client: DoitClient, args: argparse.Namespace) -> None:
    """Create a resource from a JSON body."""
    try:
        record = load_record(args.kind, args.file)
        created = operations_for(client, args.kind).create(record)
        record_output(created)
    except DoitError as e:
        error_output(e)


def cmd_update(client: DoitClient, args: argparse.Namespace) -> None:
    """Update a resource and print the state read back afterwards."""
    try:
        record = load_record(args.kind, args.file)
        record = dataclasses.replace(record, id=args.id)
        updated = operations_for(client, args.kind).update_and_get(args.id, record)
        record_output(updated)
    except DoitError as e:
        error_output(e)


def cmd_delete(client: DoitClient, args: argparse.Namespace) -> None:
    """Delete a resource."""
    try:
        operations_for(client, args.kind).delete(args.id)
        success_output({"success": True, "message": f"{args.kind} {args.id} deleted"})
    except DoitError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="doit",
        description="DoiT CLI - Manage DoiT Console analytics resources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  DOIT_HOST, DOIT_API_TOKEN, DOIT_CUSTOMER_CONTEXT

Examples:
  doit attribution get <id>
  doit attribution-group create group.json
  doit report update <id> - < report.json
  doit report delete <id>
""",
    )
    parser.add_argument("--host", help="API host (overrides DOIT_HOST)")
    parser.add_argument("--customer-context", "-c", help="Customer context (overrides DOIT_CUSTOMER_CONTEXT)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Resource kinds")

    for kind, help_text in (
        ("attribution", "Manage attributions"),
        ("attribution-group", "Manage attribution groups"),
        ("report", "Manage reports"),
    ):
        kind_parser = subparsers.add_parser(kind, help=help_text)
        kind_parser.set_defaults(func=lambda _c, _a, p=kind_parser: p.print_help(), kind=kind)
        kind_sub = kind_parser.add_subparsers(dest="subcommand")

        k_get = kind_sub.add_parser("get", help=f"Get a {kind}")
        k_get.add_argument("id", help="Resource ID")
        k_get.set_defaults(func=cmd_get)

        k_create = kind_sub.add_parser("create", help=f"Create a {kind}")
        k_create.add_argument("file", help="JSON body file (or - for stdin)")
        k_create.set_defaults(func=cmd_create)

        k_update = kind_sub.add_parser("update", help=f"Update a {kind}")
        k_update.add_argument("id", help="Resource ID")
        k_update.add_argument("file", help="JSON body file (or - for stdin)")
        k_update.set_defaults(func=cmd_update)

        k_delete = kind_sub.add_parser("delete", help=f"Delete a {kind}")
        k_delete.add_argument("id", help="Resource ID")
        k_delete.set_defaults(func=cmd_delete)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # A kind without a verb only prints its help
    if not args.subcommand:
        args.func(None, args)
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    # Create client
    try:
        client = DoitClient.from_env(host=args.host, customer_context=args.customer_context)
    except DoitError as e:
        error_output(e)

    # Run command
    args.func(client, args)


if __name__ == "__main__":
    main()
