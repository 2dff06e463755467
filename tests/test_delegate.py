"""Tests for trill.delegate — action table, run contract, host forwarding, fallback templates."""

from collections.abc import Sequence
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from trill.delegate import Delegate
from trill.errors import OperationNotFound

# =============================================================================
# Helpers
# =============================================================================


class FakeView:
    """In-memory render context. ``files`` holds absolute paths that exist."""

    def __init__(self, files: Sequence[str] = (), search_paths: Sequence[str] = ("/host",)) -> None:
        self.files = set(files)
        self._flat = False
        self._paths = tuple(search_paths)
        self.rendered: list[str] = []
        self.state_during_render: tuple[bool, tuple[str, ...]] | None = None
        self.fail = False

    @property
    def flat_naming(self) -> bool:
        return self._flat

    @property
    def search_paths(self) -> tuple[str, ...]:
        return self._paths

    def script_path_for(self, action: str) -> str:
        return f"{action}.html" if self._flat else f"posts/{action}.html"

    def resolve_absolute(self, path: str) -> str | None:
        for directory in self._paths:
            full = f"{directory}/{path}"
            if full in self.files:
                return full
        return None

    def set_flat_naming(self, flag: bool) -> bool:
        previous, self._flat = self._flat, flag
        return previous

    def set_search_paths(self, paths: Sequence[str | Path]) -> tuple[str, ...]:
        previous, self._paths = self._paths, tuple(str(p) for p in paths)
        return previous

    def render_explicit(self, path: str) -> str:
        self.state_during_render = (self._flat, self._paths)
        if self.fail:
            raise RuntimeError("render failed")
        self.rendered.append(path)
        return f"<{path}>"


class Posts(Delegate):
    def __init__(self, fallback: Path | None = None) -> None:
        super().__init__()
        self.fallback = fallback
        self.setup_calls = 0

    def setup(self) -> None:
        self.setup_calls += 1
        if self.fallback is not None:
            self.add_fallback_path(self.fallback)

    def index_action(self) -> str:
        return "listed"

    def editAction(self, post_id: int, title: str) -> tuple[int, str]:  # noqa: N802
        return post_id, title

    def transaction(self) -> None:
        """Not an action: no suffix."""

    label_action = "not callable"


class ArchivedPosts(Posts):
    def archive_action(self) -> str:
        return "archived"


def _host(view: Any = None, **attrs: Any) -> SimpleNamespace:
    return SimpleNamespace(view=view, **attrs)


# =============================================================================
# Action table
# =============================================================================


class TestListOperations:
    def test_suffix_convention(self) -> None:
        assert Posts.list_operations() == frozenset({"index", "edit"})

    def test_from_instance(self) -> None:
        assert Posts().list_operations() == frozenset({"index", "edit"})

    def test_inherited_actions(self) -> None:
        assert ArchivedPosts.list_operations() == frozenset({"index", "edit", "archive"})

    def test_base_has_no_actions(self) -> None:
        assert Delegate.list_operations() == frozenset()

    def test_computed_without_running_actions(self) -> None:
        class Explosive(Delegate):
            def boom_action(self) -> None:
                raise AssertionError("must not run")

        assert Explosive.list_operations() == frozenset({"boom"})


# =============================================================================
# run()
# =============================================================================


class TestRun:
    def test_returns_action_result(self) -> None:
        assert Posts().run("index") == "listed"

    def test_args_applied_positionally(self) -> None:
        assert Posts().run("edit", [3, "Hello"]) == (3, "Hello")

    def test_accepts_unnormalized_name(self) -> None:
        assert Posts().run("indexAction") == "listed"

    def test_setup_runs_each_call(self) -> None:
        posts = Posts()
        posts.run("index")
        posts.run("index")
        assert posts.setup_calls == 2

    def test_unknown_operation(self) -> None:
        posts = Posts()
        with pytest.raises(OperationNotFound) as exc_info:
            posts.run("delete")
        assert exc_info.value.action == "delete"
        assert exc_info.value.delegate is posts
        assert posts.setup_calls == 0

    def test_non_action_method_is_not_runnable(self) -> None:
        with pytest.raises(OperationNotFound):
            Posts().run("transaction")


# =============================================================================
# Host binding and forwarding
# =============================================================================


class TestHostForwarding:
    def test_bind_returns_self(self) -> None:
        posts = Posts()
        host = _host()
        assert posts.bind(host) is posts
        assert posts.host is host

    def test_constructor_binds(self) -> None:
        host = _host()
        assert Delegate(host).host is host

    def test_reads_host_attribute(self) -> None:
        posts = Posts()
        posts.bind(_host(title="From host"))
        assert posts.title == "From host"

    def test_calls_host_method(self) -> None:
        posts = Posts()
        posts.bind(_host(greet=lambda name: f"hi {name}"))
        assert posts.greet("ada") == "hi ada"

    def test_own_attributes_win(self) -> None:
        posts = Posts()
        posts.bind(_host(setup_calls=99))
        assert posts.setup_calls == 0

    def test_unbound_raises_attribute_error(self) -> None:
        with pytest.raises(AttributeError, match="no host"):
            Posts().title  # noqa: B018

    def test_missing_on_host_raises_attribute_error(self) -> None:
        posts = Posts()
        posts.bind(_host())
        with pytest.raises(AttributeError):
            posts.missing  # noqa: B018

    def test_dunder_not_forwarded(self) -> None:
        posts = Posts()
        posts.bind(_host(__custom__="x"))
        with pytest.raises(AttributeError):
            posts.__custom__  # noqa: B018


# =============================================================================
# Fallback paths
# =============================================================================


class TestFallbackPaths:
    def test_stored_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        posts = Posts()
        posts.add_fallback_path("views")
        assert posts.fallback_paths == (str((tmp_path / "views").resolve()),)

    def test_missing_directory_still_stored(self, tmp_path: Path) -> None:
        missing = tmp_path / "does-not-exist"
        posts = Posts()
        posts.add_fallback_path(missing)
        assert posts.fallback_paths == (str(missing.resolve()),)

    def test_order_kept_and_duplicates_ignored(self, tmp_path: Path) -> None:
        posts = Posts()
        posts.add_fallback_path(tmp_path / "a").add_fallback_path(tmp_path / "b")
        posts.add_fallback_path(tmp_path / "a")
        assert posts.fallback_paths == (
            str((tmp_path / "a").resolve()),
            str((tmp_path / "b").resolve()),
        )

    def test_setup_does_not_grow_paths(self, tmp_path: Path) -> None:
        posts = Posts(fallback=tmp_path)
        posts.run("index")
        posts.run("index")
        assert len(posts.fallback_paths) == 1


# =============================================================================
# View fallback resolution
# =============================================================================


class TestRenderFallback:
    def _setup(self, tmp_path: Path, files: Sequence[str] = ()) -> tuple[Posts, FakeView, str]:
        fallback = str((tmp_path / "fallback").resolve())
        view = FakeView(files=files)
        posts = Posts(fallback=tmp_path / "fallback")
        posts.bind(_host(view))
        return posts, view, fallback

    def test_renders_fallback_when_no_override(self, tmp_path: Path) -> None:
        fallback = str((tmp_path / "fallback").resolve())
        posts, view, _ = self._setup(tmp_path, files=[f"{fallback}/index.html"])

        posts.run("index")

        assert view.rendered == ["index.html"]
        assert view.state_during_render == (True, (fallback,))
        assert view.flat_naming is False
        assert view.search_paths == ("/host",)

    def test_host_override_wins(self, tmp_path: Path) -> None:
        fallback = str((tmp_path / "fallback").resolve())
        posts, view, _ = self._setup(
            tmp_path, files=["/host/posts/index.html", f"{fallback}/index.html"]
        )

        posts.run("index")

        assert view.rendered == []
        assert view.state_during_render is None

    def test_missing_fallback_file_is_skipped(self, tmp_path: Path) -> None:
        posts, view, _ = self._setup(tmp_path)

        posts.run("index")

        assert view.rendered == []
        assert view.state_during_render is None
        assert view.flat_naming is False
        assert view.search_paths == ("/host",)

    def test_no_fallback_paths_leaves_view_untouched(self) -> None:
        view = FakeView()
        posts = Posts()
        posts.bind(_host(view))

        posts.run("index")

        assert view.rendered == []
        assert view.search_paths == ("/host",)

    def test_restores_when_render_raises(self, tmp_path: Path) -> None:
        fallback = str((tmp_path / "fallback").resolve())
        posts, view, _ = self._setup(tmp_path, files=[f"{fallback}/index.html"])
        view.set_flat_naming(True)
        view.fail = True

        with pytest.raises(RuntimeError, match="render failed"):
            posts.run("index")

        assert view.flat_naming is True
        assert view.search_paths == ("/host",)

    def test_render_fallback_returns_output(self, tmp_path: Path) -> None:
        fallback = str((tmp_path / "fallback").resolve())
        posts, _, _ = self._setup(tmp_path, files=[f"{fallback}/edit.html"])
        posts.setup()
        assert posts.render_fallback("edit") == "<edit.html>"

    def test_host_without_view(self, tmp_path: Path) -> None:
        posts = Posts(fallback=tmp_path)
        posts.bind(SimpleNamespace())
        assert posts.run("index") == "listed"
