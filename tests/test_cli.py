"""Tests for the toto CLI."""

from pathlib import Path

import pytest

from toto._cli import _build_parser, format_routes, main
from toto.app import Toto
from toto.config import TotoConfig


class TestParser:
    """Argument parsing."""

    def test_routes_defaults(self) -> None:
        args = _build_parser().parse_args(["routes"])
        assert args.command == "routes"
        assert args.root == "."
        assert args.prefix is None

    def test_routes_with_root_and_prefix(self) -> None:
        args = _build_parser().parse_args(["routes", "my-app", "--prefix", "/app"])
        assert args.root == "my-app"
        assert args.prefix == "/app"

    def test_serve_options(self) -> None:
        args = _build_parser().parse_args(["serve", "--host", "0.0.0.0", "--port", "9000"])
        assert args.command == "serve"
        assert args.host == "0.0.0.0"
        assert args.port == 9000

    def test_serve_defaults_defer_to_config(self) -> None:
        args = _build_parser().parse_args(["serve"])
        assert args.host is None
        assert args.port is None

    def test_verbose(self) -> None:
        assert _build_parser().parse_args(["-v", "routes"]).verbose is True


class TestFormatRoutes:
    def test_table(self, beer_menu: list[object], app_root: Path) -> None:
        plugin = Toto(beer_menu, TotoConfig(root=app_root))
        lines = format_routes(plugin.routes).splitlines()
        assert len(lines) == 10
        assert lines[0].startswith("GET  /beer/search")
        assert "collection  toto/plural.html" in lines[0]
        assert "-> /beer/search" in lines[2]
        assert "instance  toto/single.html" in lines[3]
        assert lines[-1].split()[1] == "/"

    def test_empty(self) -> None:
        assert format_routes(()) == ""


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 0
        assert "usage: toto" in capsys.readouterr().out

    def test_routes(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "toto.yaml").write_text(
            "menu:\n"
            "  - beer: {many: [search, browse], one: [picture]}\n"
            "  - pub: {many: [map], one: [info]}\n"
        )
        main(["routes", str(tmp_path), "--prefix", "/app"])
        out = capsys.readouterr().out
        assert "/app/beer/search" in out
        assert "/app/pub/default/{key:path}" in out

    def test_missing_menu_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["routes", str(tmp_path)])
        assert exc.value.code == 2
        assert "No menu declared" in capsys.readouterr().err

    def test_invalid_menu_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "toto.yaml").write_text("menu: []\n")
        with pytest.raises(SystemExit) as exc:
            main(["routes", str(tmp_path)])
        assert exc.value.code == 2
        assert "Menu is empty" in capsys.readouterr().err
