"""Command-line interface for surql.

Usage::

    surql delete person dog [--where name=Alice] [--return none]
    surql delete --record person 123 [--timeout 5] [--parallel]
    surql delete --relation person:1 knows:1 person:2
    python -m surql delete ...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from .exc import SurqlError

log = logging.getLogger("surql.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="surql",
        description="surql CLI — compile SurrealQL queries from the command line.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False,
        help="Log debug output to stderr.",
    )
    sub = parser.add_subparsers(dest="command")

    dele = sub.add_parser("delete", help="Compile a DELETE query.")

    # What to delete: targets OR --record OR --relation
    target = dele.add_argument_group("target")
    target.add_argument(
        "targets", nargs="*",
        help="Tables or record links to delete.",
    )
    target.add_argument(
        "--record", nargs="+", metavar="PART",
        help="A single record: TABLE:ID, or TABLE ID.",
    )
    target.add_argument(
        "--relation", nargs=3, metavar=("FROM", "EDGE", "TO"),
        help="The edge EDGE between records FROM and TO.",
    )

    dele.add_argument(
        "--where", action="append", default=[], metavar="FIELD=VALUE",
        help="Equality condition (repeatable). VALUE is parsed as JSON, "
             "falling back to a string.",
    )
    dele.add_argument(
        "--where-raw", metavar="TEXT",
        help="Verbatim WHERE clause. Not escaped.",
    )
    dele.add_argument("--return", dest="return_mode", help="none, before, after or diff.")
    dele.add_argument(
        "--return-fields",
        help="Comma-separated fields to return instead of a return mode.",
    )
    dele.add_argument("--timeout", type=float, help="Timeout in seconds.")
    dele.add_argument(
        "--parallel", action="store_true", default=None,
        help="Run the query in parallel.",
    )
    dele.add_argument("--config", help="JSON/TOML/YAML file with [delete] defaults.")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "delete":
        return _cmd_delete(args)

    return 0


def _cmd_delete(args: argparse.Namespace) -> int:
    try:
        query = _build_delete(args)
        print(query.compile())
    except (SurqlError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


def _build_delete(args: argparse.Namespace) -> Any:
    from .config import cli_defaults_from_config
    from .query.delete import delete, delete_record, delete_relation
    from .values import RecordRelation

    defaults: dict[str, Any] = {}
    if args.config:
        defaults = cli_defaults_from_config(args.config)
        log.debug("config defaults from %s: %r", args.config, defaults)

    chosen = sum(bool(x) for x in (args.targets, args.record, args.relation))
    if chosen != 1:
        raise ValueError("provide exactly one of TARGETS, --record or --relation")

    if args.relation:
        from_id, edge, to_id = args.relation
        query = delete_relation(RecordRelation(from_id=from_id, edge=edge, to_id=to_id))
    elif args.record:
        if len(args.record) > 2:
            raise ValueError("--record takes TABLE:ID or TABLE ID")
        query = delete_record(*args.record)
    else:
        query = delete(*args.targets)

    if args.where and args.where_raw:
        raise ValueError("--where and --where-raw are mutually exclusive")
    if args.where:
        query = query.where(_parse_conditions(args.where))
    elif args.where_raw:
        query = query.where(args.where_raw)

    if args.return_fields:
        fields = [f.strip() for f in args.return_fields.split(",") if f.strip()]
        query = query.return_fields(*fields)
    elif args.return_mode or 'return' in defaults:
        query = query.return_(args.return_mode or defaults['return'])

    timeout = args.timeout if args.timeout is not None else defaults.get('timeout')
    if timeout is not None:
        query = query.timeout(timeout)

    parallel = args.parallel if args.parallel is not None else defaults.get('parallel')
    if parallel:
        query = query.parallel()

    return query


def _parse_conditions(pairs: list[str]) -> dict[str, Any]:
    conditions: dict[str, Any] = {}
    for pair in pairs:
        field, sep, text = pair.partition("=")
        if not sep or not field:
            raise ValueError(f"--where expects FIELD=VALUE, got {pair!r}")
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            value = text
        conditions[field.strip()] = value
    return conditions


if __name__ == "__main__":
    sys.exit(main())
