"""Controller import resolution — ``"module:Attribute"`` to a Controller instance."""

import importlib

from trill.controller import Controller


def resolve_controller(import_string: str) -> Controller:
    """Resolve an import string to a controller instance.

    The attribute may be a ``Controller`` subclass (instantiated with no
    arguments) or an existing instance.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the attribute is missing from the string or the
            resolved object is not a controller.

    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        msg = f"{import_string!r} has no ':Controller' attribute part"
        raise TypeError(msg)

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if isinstance(obj, type) and issubclass(obj, Controller):
        obj = obj()

    if not isinstance(obj, Controller):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a trill Controller"
        raise TypeError(msg)

    return obj
