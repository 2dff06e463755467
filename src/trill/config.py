"""Delegation configuration.

TrillConfig is a frozen dataclass, immutable after creation and threaded
from the composition root into every controller and delegation manager.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class TrillConfig:
    """Controller and delegate configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = TrillConfig(
            template_dirs=("views",),
            delegate_paths=(("myapp.delegates", "myapp/delegates"),),
        )
    """

    # Templates
    template_dirs: tuple[str | Path, ...] = ("templates",)
    template_suffix: str = ".html"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    auto_reload: bool = False

    # Delegate loading: (prefix, path) pairs, later pairs take priority
    delegate_paths: tuple[tuple[str, str | Path | None], ...] = ()
