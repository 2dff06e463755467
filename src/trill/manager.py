"""Delegation manager — the action table for one controller.

Mirrors the compile-then-dispatch shape of a router: delegates are
registered up front, each contributing its (filtered) actions to a
single ``{action: delegate}`` table, and every dispatch is a lookup in
that table.

Registration rules:
    - Each normalized action name has exactly one owner. A second claim
      raises ``DuplicateAction`` while registering, never at dispatch.
    - ``only`` / ``except`` filters are applied once, before indexing.
      A filtered-out action is simply not registered.
    - The table is only written during registration.

Usage::

    manager = DelegationManager(controller, ["Crud", "Map"])
    manager.run("mapAction")
    manager.add_delegate(Search(), only=["index"])
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from trill.delegate import Delegate
from trill.errors import ActionNotFound, DuplicateAction, InvalidDelegateSpec
from trill.loader import DelegateLoader, default_loader
from trill.naming import normalize_action

logger = logging.getLogger("trill.delegation")

type DelegateId = Delegate | type[Delegate] | str
type RegistrationSpec = Mapping[str, str | Iterable[str]]


class DelegationManager:
    """Registers delegates for a host and dispatches actions to them."""

    __slots__ = ("_actions", "_delegates", "_host", "_loader")

    def __init__(
        self,
        host: Any,
        delegates: Any = (),
        loader: DelegateLoader | None = None,
    ) -> None:
        if loader is None:
            loader = default_loader(getattr(host, "config", None))
        self._host = host
        self._loader = loader
        self._delegates: list[Delegate] = []
        self._actions: dict[str, Delegate] = {}
        self.set_delegates(delegates)

    @property
    def host(self) -> Any:
        return self._host

    @property
    def loader(self) -> DelegateLoader:
        return self._loader

    @property
    def delegates(self) -> tuple[Delegate, ...]:
        """Registered delegates in registration order."""
        return tuple(self._delegates)

    @property
    def actions(self) -> Mapping[str, Delegate]:
        """Read-only view of the action table."""
        return MappingProxyType(self._actions)

    # -- Registration --

    def set_delegates(self, delegates: Any) -> "DelegationManager":
        """Register delegates from a declaration.

        Accepts a single identifier, a sequence of identifiers or
        ``(identifier, spec)`` pairs, or a mapping ``{identifier: spec}``.
        ``None`` declares no delegates. Any other non-iterable value is
        treated as a single identifier and rejected with ``InvalidDelegateSpec``.
        """
        if delegates is None:
            return self
        if isinstance(delegates, Mapping):
            for delegate_id, spec in delegates.items():
                self.add_delegate(delegate_id, spec)
        elif isinstance(delegates, (str, Delegate, type)) or not isinstance(delegates, Iterable):
            self.add_delegate(delegates)
        else:
            for item in delegates:
                if isinstance(item, tuple) and len(item) == 2 and isinstance(item[1], Mapping):
                    self.add_delegate(item[0], item[1])
                else:
                    self.add_delegate(item)
        return self

    def add_delegate(
        self,
        delegate_id: DelegateId,
        spec: RegistrationSpec | None = None,
        *,
        only: str | Iterable[str] | None = None,
        except_: str | Iterable[str] | None = None,
    ) -> "DelegationManager":
        """Register a delegate, optionally limited by ``only`` / ``except``.

        *spec* may carry ``"only"`` and ``"except"`` keys; the keyword
        arguments are the same options in Python-friendly form.

        Raises ``DuplicateAction`` if any allowed action is already owned.
        """
        spec = dict(spec or {})
        if only is not None:
            spec["only"] = only
        if except_ is not None:
            spec["except"] = except_

        delegate = self._load_delegate(delegate_id)
        actions = _filter_actions(delegate.list_operations(), spec)

        for action in actions:
            owner = self._actions.get(action)
            if owner is not None:
                raise DuplicateAction(action, owner, delegate)

        for action in actions:
            self._actions[action] = delegate
        self._delegates.append(delegate)

        logger.debug(
            "Registered %s for %s: %s",
            type(delegate).__name__,
            type(self._host).__name__,
            ", ".join(actions) or "(no actions)",
        )
        return self

    def _load_delegate(self, delegate_id: DelegateId) -> Delegate:
        """Turn an identifier into a delegate instance bound to the host."""
        if isinstance(delegate_id, Delegate):
            delegate = delegate_id
        elif isinstance(delegate_id, type) and issubclass(delegate_id, Delegate):
            delegate = delegate_id()
        elif isinstance(delegate_id, str):
            delegate = self._loader.load(delegate_id)()
        else:
            raise InvalidDelegateSpec(delegate_id)

        delegate.bind(self._host)
        return delegate

    # -- Dispatch --

    def has_action(self, action: str) -> bool:
        return normalize_action(action) in self._actions

    def get_delegate_for_action(self, action: str) -> Delegate:
        """Return the delegate owning *action*. Raises ``ActionNotFound``."""
        normalized = normalize_action(action)
        delegate = self._actions.get(normalized)
        if delegate is None:
            raise ActionNotFound(normalized)
        return delegate

    def run(self, action: str, args: tuple[Any, ...] | list[Any] | None = None) -> Any:
        """Dispatch *action* to its delegate and return the action's result."""
        normalized = normalize_action(action)
        delegate = self.get_delegate_for_action(normalized)
        logger.debug("Dispatching %s to %s", normalized, type(delegate).__name__)
        return delegate.run(normalized, args)


def _filter_actions(actions: Iterable[str], spec: RegistrationSpec) -> list[str]:
    """Apply ``only`` then ``except`` to *actions*; result is sorted."""
    allowed = {normalize_action(a) for a in actions}

    only = _names(spec.get("only"))
    if only:
        allowed &= only

    excluded = _names(spec.get("except"))
    if excluded:
        allowed -= excluded

    return sorted(allowed)


def _names(value: str | Iterable[str] | None) -> set[str]:
    if not value:
        return set()
    if isinstance(value, str):
        value = (value,)
    return {normalize_action(v) for v in value}
