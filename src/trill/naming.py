"""Action-name normalization.

Every name that enters the action mapping, and every name looked up in
it, passes through ``normalize_action``. The host, the manager, and the
delegate all call it, so it must be a fixed point::

    normalize_action(normalize_action(name)) == normalize_action(name)
"""

import re

ACTION_SUFFIX = "action"
"""Suffix marking a method as an action (``index_action``, ``indexAction``)."""

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_action(name: str) -> str:
    """Lower-case *name* and strip any trailing action suffix.

    ``"Index"``, ``"index"``, ``"indexAction"``, ``"index_action"`` and
    ``"INDEXACTION"`` all normalize to ``"index"``. The suffix is
    stripped repeatedly, so the result never ends in it (unless the whole
    name is the suffix itself).

    Any name ending in ``action`` collapses: ``transaction_action`` and
    ``trans_action`` both normalize to ``"trans"`` and count as the same
    action when registered on one manager.
    """
    action = name.lower()
    while action.endswith(ACTION_SUFFIX) and len(action) > len(ACTION_SUFFIX):
        action = action[: -len(ACTION_SUFFIX)].rstrip("_") or ACTION_SUFFIX
    return action


def is_action_name(name: str) -> bool:
    """Return True if a method named *name* is an action.

    Matches ``map_action`` and ``mapAction`` but not ``transaction``.
    """
    for suffix in ("_action", "Action"):
        if name.endswith(suffix) and len(name) > len(suffix):
            return True
    return False


def module_name_for(name: str) -> str:
    """Module name for a delegate class name: ``"CrudList"`` → ``"crud_list"``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()
