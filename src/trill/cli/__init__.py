"""Trill CLI — inspect controller action tables.

Entry point registered as ``trill`` in ``pyproject.toml``::

    [project.scripts]
    trill = "trill.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``trill`` command."""
    parser = argparse.ArgumentParser(
        prog="trill",
        description="Trill — controller delegation for Python web hosts.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- trill actions ----------------------------------------------------
    actions_parser = subparsers.add_parser(
        "actions", help="List a controller's actions and the delegates that own them"
    )
    actions_parser.add_argument(
        "controller",
        help="Import string (e.g. myapp.controllers:IndexController)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "actions":
        from trill.cli._actions import run_actions

        run_actions(args)
