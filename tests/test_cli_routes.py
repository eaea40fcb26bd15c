"""Tests for ``tinyrouter routes`` and ``tinyrouter match``."""

import sys
import types

import pytest

from tinyrouter.cli import main
from tinyrouter.routing.router import Router


def show_user() -> str:
    return "user"


def list_files() -> str:
    return "files"


@pytest.fixture
def _fake_module(monkeypatch: pytest.MonkeyPatch) -> None:
    mod = types.ModuleType("_fake_cli_routes")
    router: Router[object] = Router()
    router.get("/users/:id", show_user).get("/users/(.*)", list_files).all("*", "fallback")
    mod.router = router  # type: ignore[attr-defined]
    mod.empty = Router()  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_cli_routes", mod)


@pytest.mark.usefixtures("_fake_module")
class TestRoutesCommand:
    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_cli_routes"])
        out = capsys.readouterr().out

        lines = out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert "/users/:id" in lines[2]
        assert "show_user" in lines[2]
        assert lines[4].split() == ["ALL", "(.*)", "'fallback'"]

    def test_empty_router(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_cli_routes:empty"])
        assert "No routes registered." in capsys.readouterr().out

    def test_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_cli_routes:missing"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_module")
class TestMatchCommand:
    def test_first_match(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_cli_routes", "GET", "/users/42"])
        out = capsys.readouterr().out

        assert "GET /users/:id  ->  show_user" in out
        assert "id = '42'" in out
        assert "list_files" not in out

    def test_all_matches(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_cli_routes", "GET", "/users/42", "--all"])
        out = capsys.readouterr().out

        assert "show_user" in out
        assert "list_files" in out
        assert "'fallback'" in out

    def test_no_match_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "_fake_cli_routes:empty", "GET", "/nothing"])
        assert exc_info.value.code == 1
        assert "No route matches GET '/nothing'" in capsys.readouterr().err
