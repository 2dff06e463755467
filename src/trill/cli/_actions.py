"""``trill actions`` — list a controller's action table.

Resolves an import string to a controller, builds its delegation
manager, and prints every action with its owner.
"""

import argparse
import sys

from trill.cli._resolve import resolve_controller
from trill.errors import ConfigurationError


def run_actions(args: argparse.Namespace) -> None:
    """Print ACTION, OWNER, and SOURCE for every action of ``args.controller``."""
    try:
        controller = resolve_controller(args.controller)
        manager = controller.delegate_manager
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str]] = [
        (action, type(controller).__name__, "native") for action in controller._native_actions
    ]
    rows.extend(
        (action, type(delegate).__name__, "delegate")
        for action, delegate in manager.actions.items()
    )

    if not rows:
        print("No actions registered.")
        return

    rows.sort()
    max_action = max(max(len(r[0]) for r in rows), 6)  # "ACTION" header
    max_owner = max(max(len(r[1]) for r in rows), 5)  # "OWNER" header

    fmt = f"{{:<{max_action}}}  {{:<{max_owner}}}  {{}}"
    print(fmt.format("ACTION", "OWNER", "SOURCE"))
    print("-" * min(max_action + max_owner + 4 + len("delegate"), 80))
    for action, owner, source in rows:
        print(fmt.format(action, owner, source))
