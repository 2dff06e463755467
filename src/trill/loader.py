"""Delegate loader — resolves delegate names to delegate classes.

Names are looked up under a table of ``{prefix: path}`` entries. For the
name ``"CrudList"`` and prefix ``"myapp.delegates"`` the loader imports
``myapp.delegates.crud_list`` and takes its ``CrudList`` attribute. When
that module cannot be imported and the entry has a path, the file
``<path>/crud_list.py`` is loaded instead.

Prefixes added later are searched first. The built-in ``trill.delegates``
prefix is always searched last.

Explicit ``"module:ClassName"`` strings skip the prefix search.

The process-wide table is set once by the embedding application::

    set_default_paths({"myapp.delegates": "src/myapp/delegates"})

and is read by every loader built with ``default_loader()`` afterwards.
"""

import importlib
import importlib.util
import logging
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import ModuleType

from trill.config import TrillConfig
from trill.delegate import Delegate
from trill.errors import DelegateNotFound, InvalidDelegateSpec
from trill.naming import module_name_for

logger = logging.getLogger("trill.loader")

BUILTIN_PREFIX = "trill.delegates"

type PathTable = Mapping[str, str | Path | None] | Iterable[tuple[str, str | Path | None]]

# -- Process-wide defaults --

_default_paths: dict[str, str | None] = {}


def set_default_paths(paths: PathTable) -> None:
    """Add entries to the process-wide ``{prefix: path}`` table.

    Entries are never removed. Setting a prefix again replaces its path
    and gives it the highest priority.
    """
    for prefix, path in _iter_paths(paths):
        _default_paths.pop(prefix, None)
        _default_paths[prefix] = path


def default_paths() -> dict[str, str | None]:
    """Return a copy of the process-wide path table."""
    return dict(_default_paths)


def default_loader(config: TrillConfig | None = None) -> "DelegateLoader":
    """Build a loader from the process-wide table plus ``config.delegate_paths``.

    Entries from *config* take priority over the process-wide ones.
    """
    loader = DelegateLoader(_default_paths)
    if config is not None:
        loader.add_paths(config.delegate_paths)
    return loader


# -- Loader --


class DelegateLoader:
    """Prefix-keyed delegate class resolution with a per-loader cache."""

    __slots__ = ("_cache", "_paths")

    def __init__(self, paths: PathTable | None = None) -> None:
        self._paths: dict[str, str | None] = {BUILTIN_PREFIX: None}
        self._cache: dict[str, type[Delegate]] = {}
        if paths:
            self.add_paths(paths)

    def add_prefix_path(self, prefix: str, path: str | Path | None = None) -> "DelegateLoader":
        """Register *prefix* (searched before every existing prefix)."""
        self._paths.pop(prefix, None)
        self._paths[prefix] = str(path) if path is not None else None
        self._cache.clear()
        return self

    def add_paths(self, paths: PathTable) -> "DelegateLoader":
        for prefix, path in _iter_paths(paths):
            self.add_prefix_path(prefix, path)
        return self

    @property
    def paths(self) -> tuple[tuple[str, str | None], ...]:
        """Registered entries in search order (highest priority first)."""
        return tuple(reversed(self._paths.items()))

    def load(self, name: str) -> type[Delegate]:
        """Resolve *name* to a ``Delegate`` subclass.

        Raises ``DelegateNotFound`` if no prefix provides it, and
        ``InvalidDelegateSpec`` if the resolved object is not a delegate class.
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        if ":" in name:
            cls = self._load_import_string(name)
        else:
            cls = self._search(name)

        self._cache[name] = cls
        return cls

    def _load_import_string(self, name: str) -> type[Delegate]:
        module_path, _, attr_name = name.partition(":")
        try:
            module = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            if not _is_missing(module_path, exc):
                raise
            raise DelegateNotFound(name, (name,)) from exc
        obj = getattr(module, attr_name, None)
        if obj is None:
            raise DelegateNotFound(name, (name,))
        return _accept(name, obj)

    def _search(self, name: str) -> type[Delegate]:
        module_name = module_name_for(name)
        tried: list[str] = []

        for prefix, path in self.paths:
            candidate = f"{prefix}.{module_name}" if prefix else module_name
            tried.append(f"{candidate}:{name}")
            module = _import_candidate(candidate, module_name, path)
            if module is None:
                continue
            obj = getattr(module, name, None)
            if obj is None:
                continue
            logger.debug("Resolved delegate %r to %s:%s", name, candidate, name)
            return _accept(name, obj)

        raise DelegateNotFound(name, tried)


def _import_candidate(candidate: str, module_name: str, path: str | None) -> ModuleType | None:
    """Import *candidate*, falling back to ``<path>/<module_name>.py``."""
    try:
        return importlib.import_module(candidate)
    except ModuleNotFoundError as exc:
        if not _is_missing(candidate, exc):
            raise

    if path is None:
        return None

    file = Path(path) / f"{module_name}.py"
    if not file.is_file():
        return None

    spec = importlib.util.spec_from_file_location(candidate, file)
    if spec is None or spec.loader is None:
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[candidate] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(candidate, None)
        raise
    logger.debug("Loaded delegate module %s from %s", candidate, file)
    return module


def _is_missing(module_path: str, exc: ModuleNotFoundError) -> bool:
    """True if *exc* is about *module_path* itself (or a parent package).

    A missing dependency imported by the delegate module is a real error.
    """
    if exc.name is None:
        return False
    return module_path == exc.name or module_path.startswith(f"{exc.name}.")


def _accept(name: str, obj: object) -> type[Delegate]:
    if isinstance(obj, type) and issubclass(obj, Delegate):
        return obj
    msg = f"{name!r} resolved to {obj!r}, not a Delegate subclass"
    raise InvalidDelegateSpec(obj, msg)


def _iter_paths(paths: PathTable) -> Iterable[tuple[str, str | None]]:
    items = paths.items() if isinstance(paths, Mapping) else paths
    for prefix, path in items:
        yield prefix, str(path) if path is not None else None
