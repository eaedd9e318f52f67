"""
Unit tests for CLI functions.
"""

import logging
import tempfile
from pathlib import Path

import pytest

from tag_router.cli import TAG_TABLE, main, parse_args, parse_mode, setup_logging
from tag_router.types import TransferMode


class TestParseMode:
    """Tests for parse_mode function."""

    @pytest.mark.parametrize("value", ["copy", "COPY", "Copy", " copy "])
    def test_copy(self, value):
        """The word copy in any case selects copy."""
        assert parse_mode(value) is TransferMode.COPY

    @pytest.mark.parametrize("value", [None, "move", "MOVE", "cp", ""])
    def test_anything_else_moves(self, value):
        """Anything other than copy selects move."""
        assert parse_mode(value) is TransferMode.MOVE


class TestParseArgs:
    """Tests for parse_args function."""

    def test_positional_arguments(self):
        """Source, root and mode are positional."""
        args = parse_args(["in.txt", "out", "copy"])
        assert args.source == "in.txt"
        assert args.dest_root == "out"
        assert args.mode == "copy"
        assert not args.verbose

    def test_mode_defaults_to_move(self):
        """Mode is optional."""
        args = parse_args(["in.txt", "out"])
        assert args.mode == "move"

    def test_missing_arguments(self):
        """Missing destination is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["in.txt"])
        assert exc_info.value.code == 2


class TestTagTable:
    """Tests for the fixed tag table."""

    def test_entries(self):
        """Known tags map to their folders regardless of case."""
        assert TAG_TABLE["setup"] == "Setup"
        assert TAG_TABLE["LOG"] == "Logs"
        assert TAG_TABLE["Config"] == "Configs"


class TestMain:
    """Tests for main function."""

    def test_move(self, capsys):
        """Moves a tagged file and prints the destination."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            src = base / "[log]server.txt"
            src.write_text("log line")

            exit_code = main([str(src), str(base / "sorted")])

            expected = base / "sorted" / "Logs" / "server.txt"
            assert exit_code == 0
            assert not src.exists()
            assert expected.read_text() == "log line"
            assert str(expected) in capsys.readouterr().out

    def test_copy(self, capsys):
        """Copy mode keeps the source."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            src = base / "[Setup]app.exe"
            src.write_bytes(b"MZ")

            exit_code = main([str(src), str(base / "sorted"), "Copy"])

            assert exit_code == 0
            assert src.exists()
            assert (base / "sorted" / "Setup" / "app.exe").read_bytes() == b"MZ"
            assert "copied" in capsys.readouterr().out

    def test_untagged_goes_to_unsorted(self):
        """Untagged files land in Unsorted."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            src = base / "notes.txt"
            src.write_text("x")

            assert main([str(src), str(base / "sorted")]) == 0
            assert (base / "sorted" / "Unsorted" / "notes.txt").exists()

    def test_missing_source(self, capsys):
        """Missing source prints an error instead of crashing."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)

            exit_code = main([str(base / "missing.txt"), str(base / "sorted")])

            captured = capsys.readouterr()
            assert exit_code == 1
            assert "Error:" in captured.err
            assert "missing.txt" in captured.err
            assert captured.out == ""

    def test_blank_destination(self, capsys):
        """Blank destination root is reported."""
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "a.txt"
            src.write_text("x")

            exit_code = main([str(src), "  "])

            assert exit_code == 1
            assert "dest_root" in capsys.readouterr().err
            assert src.exists()

    def test_version(self, capsys):
        """--version prints and exits cleanly."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "tag-router" in capsys.readouterr().out


class TestLogging:
    """Tests for console logging setup."""

    def test_default_level_hides_routing_warnings(self, monkeypatch):
        """Without --verbose only errors are logged."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

        setup_logging()
        setup_logging(verbose=True)

        assert calls[0]["level"] == logging.ERROR
        assert calls[1]["level"] == logging.DEBUG

    def test_failure_logged_below_default_level(self, caplog):
        """Routing failures are logged at WARNING, below the CLI default."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            with caplog.at_level(logging.DEBUG, logger="tag_router"):
                exit_code = main([str(base / "missing.txt"), str(base / "sorted")])

        failures = [
            r for r in caplog.records
            if r.name == "tag_router.router" and "not found" in r.getMessage()
        ]
        assert exit_code == 1
        assert len(failures) == 1
        assert failures[0].levelno == logging.WARNING
