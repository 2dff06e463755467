"""Trill exception hierarchy.

Shared across the loader, manager, delegate, and controller so every
module raises and catches the same types. Registration-time problems
are ``ConfigurationError`` subclasses; dispatch-time problems derive
from ``TrillError`` directly.
"""

from collections.abc import Sequence


class TrillError(Exception):
    """Base for all trill-specific errors."""


class ConfigurationError(TrillError):
    """Raised when delegate configuration is invalid.

    Surfaces while a ``DelegationManager`` is being built, never during
    dispatch.
    """


class InvalidDelegateSpec(ConfigurationError, TypeError):  # noqa: N818
    """A delegate identifier is neither a delegate, a delegate class, nor a string."""

    def __init__(self, value: object, detail: str = "") -> None:
        self.value = value
        msg = detail or (
            f"Delegate identifier {value!r} ({type(value).__name__}) is not understood"
        )
        super().__init__(msg)


class DelegateNotFound(ConfigurationError, LookupError):  # noqa: N818
    """The loader could not resolve a delegate name against any prefix."""

    def __init__(self, name: str, tried: Sequence[str] = ()) -> None:
        self.name = name
        self.tried = tuple(tried)
        msg = f"Delegate {name!r} was not found"
        if self.tried:
            msg += f". Tried: {', '.join(self.tried)}"
        super().__init__(msg)


class DuplicateAction(ConfigurationError):  # noqa: N818
    """Two delegates claim the same normalized action name."""

    def __init__(self, action: str, existing: object, incoming: object) -> None:
        self.action = action
        self.existing = existing
        self.incoming = incoming
        msg = (
            f"Action {action!r} is already registered by "
            f"{type(existing).__name__}; {type(incoming).__name__} cannot claim it"
        )
        super().__init__(msg)


class ActionNotFound(TrillError, LookupError):  # noqa: N818
    """No registered delegate owns the requested action."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Action {action!r} was not found")


class OperationNotFound(TrillError, AttributeError):  # noqa: N818
    """A delegate was asked to run an operation it does not implement."""

    def __init__(self, action: str, delegate: object) -> None:
        self.action = action
        self.delegate = delegate
        super().__init__(f"{type(delegate).__name__} has no operation {action!r}")
