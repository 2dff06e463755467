"""Map delegate — a single ``map`` action with a fallback template."""

from trill.delegate import Delegate
from trill.delegates import TEMPLATES_DIR


class Map(Delegate):
    def setup(self) -> None:
        self.add_fallback_path(TEMPLATES_DIR / "map")

    def map_action(self) -> None:
        self.view.message = "index page"
