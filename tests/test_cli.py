"""
Tests for CLI functionality.

These tests verify the command-line interface logic.
"""

from __future__ import annotations

import argparse
import json
import unittest.mock
from io import StringIO
from typing import TYPE_CHECKING
from unittest.mock import patch

if TYPE_CHECKING:
    from pathlib import Path

import pytest

from herring_forecast.cli import (
    cmd_forecast,
    cmd_info,
    cmd_refresh,
    cmd_serve,
    create_parser,
    main,
)

SAMPLE_CSV = (
    "LocationCode,LocationName,Latitude,Longitude,StartDate,EndDate,Year,"
    "Understory,Macrocystis,Surface\n"
    "101,Fulford Harbour,48.77,-123.45,2023-03-01,,2023,10,NA,0\n"
    "101,Fulford Harbour,48.77,-123.45,2024-03-01,,2024,20,NA,0\n"
    "101,Fulford Harbour,48.77,-123.45,2025-03-01,,2025,30,NA,0\n"
    "202,Nanoose Bay,49.27,-124.16,2021-03-05,,2021,40,0,0\n"
    "202,Nanoose Bay,49.27,-124.16,2022-03-05,,2022,40,0,0\n"
    "303,Bad Row,,-124.16,2022-03-05,,2022,40,0,0\n"
)


def _write_csv(tmp_path: Path, text: str = SAMPLE_CSV) -> Path:
    path = tmp_path / "spawn.csv"
    path.write_text(text, encoding="utf-8")
    return path


def _mock_server() -> unittest.mock.MagicMock:
    server = unittest.mock.MagicMock()
    server.__enter__ = unittest.mock.Mock(return_value=server)
    server.__exit__ = unittest.mock.Mock(return_value=False)
    server.serve_forever = unittest.mock.Mock(side_effect=KeyboardInterrupt)
    return server


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self) -> None:
        """Parser is created successfully."""
        parser = create_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "herring-forecast"

    def test_parser_has_version(self) -> None:
        """Parser has version argument."""
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["--version"])

    def test_parser_has_debug_flag(self) -> None:
        parser = create_parser()
        args = parser.parse_args(["--debug", "info"])
        assert args.debug is True

    def test_parser_forecast_command(self, tmp_path: Path) -> None:
        """Forecast takes a CSV path and config flags."""
        parser = create_parser()
        args = parser.parse_args(
            [
                "forecast",
                str(tmp_path / "spawn.csv"),
                "--target-year",
                "2026",
                "--window-start",
                "2018",
                "--min-measured",
                "3",
            ]
        )
        assert args.command == "forecast"
        assert args.csv == tmp_path / "spawn.csv"
        assert args.target_year == 2026
        assert args.window_start == 2018
        assert args.window_end is None
        assert args.min_measured == 3
        assert args.limit == 10

    def test_parser_refresh_command(self) -> None:
        parser = create_parser()
        args = parser.parse_args(["refresh", "--force"])
        assert args.force is True
        assert args.csv is None

    def test_parser_serve_command(self) -> None:
        parser = create_parser()
        args = parser.parse_args(["serve", "--port", "9000"])
        assert args.port == 9000


class TestCmdInfo:
    """Tests for cmd_info function."""

    def test_prints_info(self) -> None:
        args = argparse.Namespace()

        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            exit_code = cmd_info(args)
            output = mock_stdout.getvalue()

        assert exit_code == 0
        assert "Version" in output
        assert "Analysis window" in output


class TestCmdForecast:
    """Tests for cmd_forecast function."""

    def test_prints_report_and_top(self, tmp_path: Path) -> None:
        csv_path = _write_csv(tmp_path)
        args = create_parser().parse_args(["forecast", str(csv_path), "--target-year", "2026"])

        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            exit_code = cmd_forecast(args)
            output = mock_stdout.getvalue()

        assert exit_code == 0
        assert "Rows read: 6" in output
        assert "missing coordinates: 1" in output
        assert "Locations forecast: 2" in output
        assert "Fulford Harbour" in output
        assert "Nanoose Bay" in output

    def test_writes_json(self, tmp_path: Path) -> None:
        csv_path = _write_csv(tmp_path)
        output = tmp_path / "out" / "predictions.json"
        args = create_parser().parse_args(
            ["forecast", str(csv_path), "--target-year", "2026", "--output", str(output)]
        )

        with patch("sys.stdout", new=StringIO()):
            exit_code = cmd_forecast(args)

        assert exit_code == 0
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["config"]["target_year"] == 2026
        assert payload["report"]["rows_read"] == 6
        assert [p["location_code"] for p in payload["predictions"]] == ["101", "202"]

    def test_missing_file(self, tmp_path: Path) -> None:
        args = create_parser().parse_args(["forecast", str(tmp_path / "none.csv")])

        with patch("sys.stderr", new=StringIO()) as mock_stderr:
            exit_code = cmd_forecast(args)

        assert exit_code == 1
        assert "Error" in mock_stderr.getvalue()

    def test_missing_columns(self, tmp_path: Path) -> None:
        csv_path = _write_csv(tmp_path, "LocationCode,Year\n101,2024\n")
        args = create_parser().parse_args(["forecast", str(csv_path), "--target-year", "2026"])

        with patch("sys.stderr", new=StringIO()) as mock_stderr:
            exit_code = cmd_forecast(args)

        assert exit_code == 1
        assert "missing required columns" in mock_stderr.getvalue()

    def test_invalid_window(self, tmp_path: Path) -> None:
        csv_path = _write_csv(tmp_path)
        args = create_parser().parse_args(
            ["forecast", str(csv_path), "--target-year", "2026", "--window-end", "2026"]
        )

        with patch("sys.stderr", new=StringIO()):
            assert cmd_forecast(args) == 1


class TestCmdRefresh:
    """Tests for cmd_refresh function."""

    def test_returns_zero(self) -> None:
        """Refresh command returns exit code 0."""
        args = create_parser().parse_args(["refresh"])

        with (
            patch("herring_forecast.cli.fetch_all") as mock_fetch,
            patch("herring_forecast.cli.build_all") as mock_build,
        ):
            mock_fetch.return_value = {"source": "cache", "path": "data/raw/spawn_index.csv"}
            mock_build.return_value = {"pages": 1, "output": "site/index.html"}

            assert cmd_refresh(args) == 0

    def test_calls_fetch_then_build(self) -> None:
        """Refresh calls fetch_all before build_all."""
        args = create_parser().parse_args(["refresh"])
        call_order: list[str] = []

        def mock_fetch(**_kwargs: object) -> dict[str, object]:
            call_order.append("fetch")
            return {}

        def mock_build(_config: object) -> dict[str, object]:
            call_order.append("build")
            return {}

        with (
            patch("herring_forecast.cli.fetch_all", side_effect=mock_fetch),
            patch("herring_forecast.cli.build_all", side_effect=mock_build),
        ):
            cmd_refresh(args)
            assert call_order == ["fetch", "build"]

    def test_passes_settings_and_flags(self, tmp_path: Path) -> None:
        """Refresh passes the source URL from settings and the CLI flags to fetch_all."""
        csv_path = tmp_path / "spawn.csv"
        args = create_parser().parse_args(
            ["refresh", "--csv", str(csv_path), "--force", "--target-year", "2024"]
        )

        with (
            patch("herring_forecast.cli.fetch_all") as mock_fetch,
            patch("herring_forecast.cli.build_all") as mock_build,
            patch("herring_forecast.cli.get_settings") as mock_settings,
        ):
            mock_settings.return_value.source_url = "https://example.org/spawn.csv"
            mock_build.return_value = {"pages": 1}

            cmd_refresh(args)

            mock_fetch.assert_called_once_with(
                source_url="https://example.org/spawn.csv", csv_path=csv_path, force=True
            )
            mock_settings.return_value.forecast_config.assert_called_once_with(
                2024, window_start_year=None, window_end_year=None
            )
            mock_build.assert_called_once_with(
                mock_settings.return_value.forecast_config.return_value
            )

    def test_fetch_error_returns_one(self) -> None:
        args = create_parser().parse_args(["refresh"])

        with (
            patch("herring_forecast.cli.fetch_all", side_effect=ValueError("no source")),
            patch("herring_forecast.cli.build_all") as mock_build,
            patch("sys.stderr", new=StringIO()) as mock_stderr,
        ):
            assert cmd_refresh(args) == 1
            mock_build.assert_not_called()
            assert "no source" in mock_stderr.getvalue()

    def test_no_data_returns_one(self) -> None:
        args = create_parser().parse_args(["refresh"])

        with (
            patch("herring_forecast.cli.fetch_all"),
            patch("herring_forecast.cli.build_all", return_value={"error": "no data"}),
            patch("sys.stderr", new=StringIO()),
        ):
            assert cmd_refresh(args) == 1


class TestCmdServe:
    """Tests for cmd_serve function."""

    def test_missing_site_dir_returns_one(self, tmp_path: Path) -> None:
        """Serve returns 1 when the site directory doesn't exist."""
        args = argparse.Namespace(port=8080)

        with (
            patch("herring_forecast.cli.SITE_DIR", tmp_path / "no-such-dir"),
            patch("sys.stderr", new=StringIO()),
        ):
            assert cmd_serve(args) == 1

    def test_uses_port_from_args(self, tmp_path: Path) -> None:
        """Serve uses --port when provided."""
        args = argparse.Namespace(port=9999)

        with (
            patch("herring_forecast.cli.SITE_DIR", tmp_path),
            patch(
                "herring_forecast.cli.http.server.HTTPServer", return_value=_mock_server()
            ) as mock_ctor,
        ):
            cmd_serve(args)
            mock_ctor.assert_called_once()
            assert mock_ctor.call_args[0][0] == ("", 9999)

    def test_uses_port_from_settings_when_none(self, tmp_path: Path) -> None:
        """Serve falls back to api_port from settings."""
        args = argparse.Namespace(port=None)

        with (
            patch("herring_forecast.cli.SITE_DIR", tmp_path),
            patch(
                "herring_forecast.cli.http.server.HTTPServer", return_value=_mock_server()
            ) as mock_ctor,
            patch("herring_forecast.cli.get_settings") as mock_settings,
        ):
            mock_settings.return_value.api_port = 5555
            cmd_serve(args)
            assert mock_ctor.call_args[0][0] == ("", 5555)

    def test_handler_serves_site_dir(self, tmp_path: Path) -> None:
        args = argparse.Namespace(port=9999)

        with (
            patch("herring_forecast.cli.SITE_DIR", tmp_path),
            patch(
                "herring_forecast.cli.http.server.HTTPServer", return_value=_mock_server()
            ) as mock_ctor,
        ):
            cmd_serve(args)
            handler = mock_ctor.call_args[0][1]
            assert handler.keywords["directory"] == str(tmp_path)


class TestMain:
    """Tests for main function."""

    def test_no_command_shows_help(self) -> None:
        """No command shows help and exits 0."""
        with (
            patch("sys.argv", ["herring-forecast"]),
            patch("sys.stdout", new=StringIO()),
        ):
            assert main() == 0

    @pytest.mark.parametrize("command", ["info", "refresh", "serve"])
    def test_dispatches(self, command: str) -> None:
        with (
            patch("sys.argv", ["herring-forecast", command]),
            patch(f"herring_forecast.cli.cmd_{command}", return_value=0) as mock_cmd,
        ):
            main()
        mock_cmd.assert_called_once()

    def test_dispatches_forecast(self, tmp_path: Path) -> None:
        with (
            patch("sys.argv", ["herring-forecast", "forecast", str(tmp_path / "a.csv")]),
            patch("herring_forecast.cli.cmd_forecast", return_value=0) as mock_cmd,
        ):
            assert main() == 0
            mock_cmd.assert_called_once()
