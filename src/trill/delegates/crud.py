"""Crud delegate — list, show, edit, and delete over the host's records.

The host provides ``records`` (a mutable mapping of id to record dict)
and ``params`` (request values). Both are read through host forwarding,
so any controller with those attributes can borrow these actions::

    class PostsController(Controller):
        delegates = {"Crud": {"except": ["delete"]}}

        def setup(self) -> None:
            self.records = load_posts()
"""

from typing import Any

from trill.delegate import Delegate
from trill.delegates import TEMPLATES_DIR


class Crud(Delegate):
    def setup(self) -> None:
        self.add_fallback_path(TEMPLATES_DIR / "crud")

    def index_action(self) -> None:
        self.view.records = list(self.records.values())

    def show_action(self) -> None:
        self.view.record = self._find()

    def edit_action(self) -> None:
        record = self._find()
        changes = self.params.get("record")
        if changes:
            record.update(changes)
        self.view.record = record

    def delete_action(self) -> None:
        record = self._find()
        del self.records[record["id"]]
        self.view.deleted = record["id"]

    def _find(self) -> dict[str, Any]:
        record_id = self.params.get("id")
        try:
            return self.records[record_id]
        except KeyError:
            msg = f"No record with id {record_id!r}"
            raise KeyError(msg) from None
