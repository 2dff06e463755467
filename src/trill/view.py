"""View layer — the render context a controller and its delegates share.

``RenderContext`` is the narrow protocol delegates rely on. ``View`` is
the kida-backed implementation used by ``Controller``: it computes script
paths from ``controller/action`` (or flat ``action`` when delegates ask
for it), checks search paths for template files, and renders with the
variables assigned on it::

    view.message = "Hello"
    view.render("index")    # renders "<controller>/index.html"

Search paths and naming mode are mutable, shared state. Anything that
changes them temporarily must go through ``fallback_scope``.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from kida import ChoiceLoader, Environment, FileSystemLoader

from trill.config import TrillConfig

logger = logging.getLogger("trill.view")


@runtime_checkable
class RenderContext(Protocol):
    """What a delegate needs from its host's view layer."""

    @property
    def flat_naming(self) -> bool: ...

    @property
    def search_paths(self) -> tuple[str, ...]: ...

    def script_path_for(self, action: str) -> str: ...

    def resolve_absolute(self, path: str) -> str | None: ...

    def set_flat_naming(self, flag: bool) -> bool: ...

    def set_search_paths(self, paths: Sequence[str | Path]) -> tuple[str, ...]: ...

    def render_explicit(self, path: str) -> str: ...


class View:
    """Kida-backed render context with attribute-style template variables.

    Attributes not starting with an underscore are template variables.
    Rendered output accumulates in ``output`` in render order.
    """

    __slots__ = (
        "_config",
        "_controller",
        "_environments",
        "_flat_naming",
        "_output",
        "_rendered",
        "_search_paths",
        "_vars",
    )

    def __init__(
        self,
        search_paths: Sequence[str | Path] | None = None,
        *,
        controller: str = "",
        config: TrillConfig | None = None,
    ) -> None:
        config = config or TrillConfig()
        if search_paths is None:
            search_paths = config.template_dirs
        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_controller", controller)
        object.__setattr__(self, "_environments", {})
        object.__setattr__(self, "_flat_naming", False)
        object.__setattr__(self, "_output", [])
        object.__setattr__(self, "_rendered", False)
        object.__setattr__(self, "_search_paths", _as_paths(search_paths))
        object.__setattr__(self, "_vars", {})

    # -- Template variables --

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._vars[name]
        except KeyError:
            msg = f"View has no variable {name!r}"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self._vars[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._vars[name]
        except KeyError:
            raise AttributeError(name) from None

    def assign(self, **values: Any) -> None:
        """Set several template variables at once."""
        self._vars.update(values)

    @property
    def variables(self) -> dict[str, Any]:
        return dict(self._vars)

    # -- Naming and search paths --

    @property
    def suffix(self) -> str:
        return self._config.template_suffix

    @property
    def controller(self) -> str:
        return self._controller

    @property
    def flat_naming(self) -> bool:
        return self._flat_naming

    @property
    def search_paths(self) -> tuple[str, ...]:
        return self._search_paths

    def set_flat_naming(self, flag: bool) -> bool:
        """Switch to ``{action}{suffix}`` naming. Returns the previous mode."""
        previous = self._flat_naming
        self._flat_naming = bool(flag)
        return previous

    def set_search_paths(self, paths: Sequence[str | Path]) -> tuple[str, ...]:
        """Replace the template search paths. Returns the previous list."""
        previous = self._search_paths
        self._search_paths = _as_paths(paths)
        return previous

    def script_path_for(self, action: str) -> str:
        """Relative template path for *action* under the current naming mode."""
        if self._flat_naming or not self._controller:
            return f"{action}{self.suffix}"
        return f"{self._controller}/{action}{self.suffix}"

    def resolve_absolute(self, path: str) -> str | None:
        """Absolute path of the first search path holding *path*, or None."""
        if not path:
            return None
        for directory in self._search_paths:
            candidate = Path(directory) / path
            if candidate.is_file():
                return str(candidate)
        return None

    # -- Rendering --

    @property
    def rendered(self) -> bool:
        """True once any template has been rendered into ``output``."""
        return self._rendered

    @property
    def output(self) -> tuple[str, ...]:
        return tuple(self._output)

    def render_explicit(self, path: str) -> str:
        """Render the template at *path* (relative to the search paths)."""
        template = self._environment().get_template(path)
        html = template.render(dict(self._vars))
        self._output.append(html)
        self._rendered = True
        logger.debug("Rendered %s from %s", path, ", ".join(self._search_paths))
        return html

    def render(self, action: str) -> str:
        """Render the conventional template for *action*."""
        return self.render_explicit(self.script_path_for(action))

    def _environment(self) -> Environment:
        """Kida environment for the current search paths, cached per path list."""
        env = self._environments.get(self._search_paths)
        if env is None:
            env = create_environment(self._search_paths, self._config)
            self._environments[self._search_paths] = env
        return env


def create_environment(paths: Sequence[str], config: TrillConfig) -> Environment:
    """Create a kida Environment searching *paths* in order."""
    loader = ChoiceLoader([FileSystemLoader(str(p)) for p in paths])
    return Environment(
        loader=loader,
        autoescape=config.autoescape,
        auto_reload=config.auto_reload,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )


@contextmanager
def fallback_scope(view: RenderContext, paths: Sequence[str | Path]) -> Iterator[RenderContext]:
    """Point *view* at *paths* with flat naming for the duration of the block.

    The previous naming mode and search paths are restored on every exit,
    including when the block raises.
    """
    previous_mode = view.set_flat_naming(True)
    previous_paths = view.set_search_paths(paths)
    try:
        yield view
    finally:
        view.set_flat_naming(previous_mode)
        view.set_search_paths(previous_paths)


def _as_paths(paths: Sequence[str | Path]) -> tuple[str, ...]:
    if isinstance(paths, (str, Path)):
        paths = (paths,)
    return tuple(str(p) for p in paths)
