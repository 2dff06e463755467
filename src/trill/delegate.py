"""Delegate base class — borrowed actions for a controller.

A delegate contributes actions to a controller that does not implement
them. Actions are methods named with the ``_action`` suffix; the table of
actions is built once per class, when the class is defined::

    class Map(Delegate):
        def setup(self) -> None:
            self.add_fallback_path(Path(__file__).parent / "templates" / "map")

        def map_action(self) -> None:
            self.view.message = "index page"

Anything not found on the delegate is looked up on the bound host, so
action code reads ``self.view`` or ``self.params`` as if it were the
controller.

After an action runs, the delegate renders its own fallback template
for it, unless the host already has a template of its own.
"""

import logging
from pathlib import Path
from typing import Any, ClassVar

from trill.errors import OperationNotFound
from trill.naming import is_action_name, normalize_action
from trill.view import RenderContext, fallback_scope

logger = logging.getLogger("trill.delegation")


class Delegate:
    """Base class for controller delegates."""

    _operations: ClassVar[dict[str, str]] = {}
    """Normalized action name → method name. Built per class."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            if klass in (object, Delegate):
                continue
            for attr, value in vars(klass).items():
                if is_action_name(attr) and callable(value):
                    table[normalize_action(attr)] = attr
        cls._operations = table

    def __init__(self, host: Any = None) -> None:
        self._host = None
        self._fallback_paths: list[str] = []
        if host is not None:
            self.bind(host)

    # -- Host binding --

    def bind(self, host: Any) -> "Delegate":
        """Attach this delegate to the controller it acts for."""
        self._host = host
        return self

    @property
    def host(self) -> Any:
        return self._host

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: forward to the host.
        if name.startswith("__") or name in ("_host", "_fallback_paths"):
            raise AttributeError(name)
        host = self.__dict__.get("_host")
        if host is None:
            msg = f"{type(self).__name__!r} has no attribute {name!r} and no host to forward to"
            raise AttributeError(msg)
        return getattr(host, name)

    # -- Actions --

    def setup(self) -> None:
        """Hook run before every action. Register fallback paths here."""

    @classmethod
    def list_operations(cls) -> frozenset[str]:
        """Normalized names of the actions this delegate implements."""
        return frozenset(cls._operations)

    def run(self, action: str, args: tuple[Any, ...] | list[Any] | None = None) -> Any:
        """Run *action* with positional *args*, then render its fallback template.

        Raises ``OperationNotFound`` if this delegate has no such action.
        """
        action = normalize_action(action)
        method_name = self._operations.get(action)
        if method_name is None:
            raise OperationNotFound(action, self)

        self.setup()
        result = getattr(self, method_name)(*(args or ()))
        self.render_fallback(action)
        return result

    # -- Fallback templates --

    def add_fallback_path(self, path: str | Path) -> "Delegate":
        """Add a directory to search for this delegate's own templates.

        Stored in absolute form. The directory does not need to exist yet.
        """
        resolved = str(Path(path).resolve())
        if resolved not in self._fallback_paths:
            self._fallback_paths.append(resolved)
        return self

    @property
    def fallback_paths(self) -> tuple[str, ...]:
        return tuple(self._fallback_paths)

    def render_fallback(self, action: str) -> str | None:
        """Render the fallback template for *action* if the host has no override.

        Returns the rendered text, or None when nothing was rendered.
        """
        view: RenderContext | None = getattr(self._host, "view", None)
        if view is None:
            return None

        override = view.resolve_absolute(view.script_path_for(action))
        if override is not None:
            logger.debug("%s: host template %s overrides fallback", action, override)
            return None

        if not self._fallback_paths:
            return None

        with fallback_scope(view, self._fallback_paths):
            path = view.script_path_for(action)
            if view.resolve_absolute(path) is None:
                logger.debug(
                    "%s: no fallback template %s in %s",
                    action,
                    path,
                    ", ".join(self._fallback_paths),
                )
                return None
            return view.render_explicit(path)
