"""Trill — borrowed controller actions through delegates.

A controller declares delegates; actions it does not implement are
dispatched to the delegate that owns them, and each delegate can ship
fallback templates for its actions.

Basic usage::

    from trill import Controller, Delegate

    class Greet(Delegate):
        def hello_action(self, name: str) -> str:
            return f"Hello, {name}!"

    class IndexController(Controller):
        delegates = (Greet, "Map")

    IndexController().dispatch("hello", "World")

Delegate names are resolved through prefix paths::

    from trill import set_default_paths
    set_default_paths({"myapp.delegates": "src/myapp/delegates"})
"""

__version__ = "0.1.0"
__all__ = [
    "ActionNotFound",
    "ConfigurationError",
    "Controller",
    "Delegate",
    "DelegateLoader",
    "DelegateNotFound",
    "DelegationManager",
    "DuplicateAction",
    "InvalidDelegateSpec",
    "OperationNotFound",
    "TrillConfig",
    "TrillError",
    "View",
    "normalize_action",
    "set_default_paths",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import trill`` fast while providing a clean top-level API.
    """
    if name == "Controller":
        from trill.controller import Controller

        return Controller

    if name == "Delegate":
        from trill.delegate import Delegate

        return Delegate

    if name == "DelegationManager":
        from trill.manager import DelegationManager

        return DelegationManager

    if name in ("DelegateLoader", "set_default_paths"):
        from trill import loader as _loader

        return getattr(_loader, name)

    if name == "TrillConfig":
        from trill.config import TrillConfig

        return TrillConfig

    if name == "View":
        from trill.view import View

        return View

    if name == "normalize_action":
        from trill.naming import normalize_action

        return normalize_action

    if name in (
        "ActionNotFound",
        "ConfigurationError",
        "DelegateNotFound",
        "DuplicateAction",
        "InvalidDelegateSpec",
        "OperationNotFound",
        "TrillError",
    ):
        from trill import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
