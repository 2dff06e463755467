"""Tests for trill.cli — argument parsing, controller resolution, and ``trill actions``."""

import sys
import types

import pytest

from trill import loader as loader_module
from trill.cli import main
from trill.cli._resolve import resolve_controller
from trill.controller import Controller
from trill.delegate import Delegate


class Archive(Delegate):
    def archive_action(self) -> None:
        pass


class BlogController(Controller):
    delegates = (Archive, "Map")

    def about_action(self) -> None:
        pass


class EmptyController(Controller):
    pass


class BrokenController(Controller):
    delegates = ("NoSuchDelegate",)


@pytest.fixture(autouse=True)
def _fake_controller_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with controllers on sys.modules."""
    monkeypatch.setattr(loader_module, "_default_paths", {})
    mod = types.ModuleType("_fake_trill_controllers")
    mod.BlogController = BlogController  # type: ignore[attr-defined]
    mod.blog = BlogController()  # type: ignore[attr-defined]
    mod.EmptyController = EmptyController  # type: ignore[attr-defined]
    mod.BrokenController = BrokenController  # type: ignore[attr-defined]
    mod.not_a_controller = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_trill_controllers", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_actions_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["actions", "--help"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "actions" in capsys.readouterr().out

    def test_actions_requires_controller(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["actions"])
        assert exc_info.value.code == 2


class TestResolveController:
    def test_class_is_instantiated(self) -> None:
        controller = resolve_controller("_fake_trill_controllers:BlogController")
        assert isinstance(controller, BlogController)

    def test_instance_returned(self) -> None:
        mod = sys.modules["_fake_trill_controllers"]
        assert resolve_controller("_fake_trill_controllers:blog") is mod.blog  # type: ignore[attr-defined]

    def test_attribute_required(self) -> None:
        with pytest.raises(TypeError, match="Controller"):
            resolve_controller("_fake_trill_controllers")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_controller("nonexistent_module_xyz:Controller")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_controller("_fake_trill_controllers:DoesNotExist")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match="not a trill Controller"):
            resolve_controller("_fake_trill_controllers:not_a_controller")


class TestActionsCommand:
    def test_lists_native_and_delegated(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["actions", "_fake_trill_controllers:BlogController"])
        out = capsys.readouterr().out
        lines = out.splitlines()

        assert lines[0].split() == ["ACTION", "OWNER", "SOURCE"]
        rows = [line.split() for line in lines[2:]]
        assert rows == [
            ["about", "BlogController", "native"],
            ["archive", "Archive", "delegate"],
            ["map", "Map", "delegate"],
        ]

    def test_no_actions(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["actions", "_fake_trill_controllers:EmptyController"])
        assert "No actions registered." in capsys.readouterr().out

    def test_resolution_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["actions", "_fake_trill_controllers:not_a_controller"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_configuration_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["actions", "_fake_trill_controllers:BrokenController"])
        assert exc_info.value.code == 1
        assert "NoSuchDelegate" in capsys.readouterr().err
