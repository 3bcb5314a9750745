"""Tests for the CLI main module."""

import io
import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from kdl_document.cli.main import create_argument_parser, load_config, main
from kdl_document.events import Event, dumps_events, loads_events
from kdl_document.shared import KdlVersion
from kdl_document.values import Boolean, Integer, String

HOST_EVENTS = [
    Event.start_node("host"),
    Event.argument(String("example1")),
    Event.property("port", Integer(22)),
    Event.property("enabled", Boolean(True)),
    Event.start_node("user"),
    Event.argument(String("root")),
    Event.end_node(),
    Event.end_node(),
    Event.eof(),
]


@pytest.fixture
def events_file():
    """A temporary JSON-lines event file holding the host document."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".jsonl", delete=False) as f:
        f.write(dumps_events(HOST_EVENTS))
        path = Path(f.name)
    yield path
    path.unlink()


class TestArgumentParser:
    """Test argument parsing and configuration overrides."""

    def test_emit_options(self):
        """Test emit specific options."""
        args = create_argument_parser().parse_args(
            ["emit", "doc.jsonl", "--kdl-version", "1", "--indent", "2"]
        )

        assert args.command == "emit"
        assert args.kdl_version == 1
        assert args.indent == 2

    def test_load_config_overrides(self):
        """Test flags override the configuration."""
        args = create_argument_parser().parse_args(
            ["--trace", "emit", "doc.jsonl", "--kdl-version", "1", "--indent", "2"]
        )
        config = load_config(args)

        assert config.builder.trace_events is True
        assert config.emitter.version is KdlVersion.V1
        assert config.emitter.indent == 2

    def test_load_config_from_file(self):
        """Test loading configuration from a JSON file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({"emitter": {"indent": 8}, "name": "wide"}, f)
            config_path = Path(f.name)

        try:
            args = create_argument_parser().parse_args(
                ["--config", str(config_path), "print", "doc.jsonl"]
            )
            config = load_config(args)
            assert config.emitter.indent == 8
            assert config.name == "wide"
        finally:
            config_path.unlink()


class TestCommands:
    """Test command output."""

    def test_emit(self, events_file, capsys):
        """Test canonical KDL text on stdout."""
        exit_code = main(["emit", str(events_file)])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            'host "example1" enabled=#true port=22 {\n'
            '    user "root"\n'
            '}\n'
        )

    def test_emit_v1_with_indent(self, events_file, capsys):
        """Test version and indent flags change the output."""
        exit_code = main(["emit", str(events_file), "--kdl-version", "1", "--indent", "2"])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            'host "example1" enabled=true port=22 {\n'
            '  user "root"\n'
            '}\n'
        )

    def test_print(self, events_file, capsys):
        """Test the s-expression rendering."""
        exit_code = main(["print", str(events_file)])

        assert exit_code == 0
        output = capsys.readouterr().out
        assert output.startswith('(document\n  (node "host"\n')
        assert '(property "port" (integer 22))' in output

    def test_flatten(self, events_file, capsys):
        """Test canonical events with sorted properties."""
        exit_code = main(["flatten", str(events_file)])

        assert exit_code == 0
        events = loads_events(capsys.readouterr().out)
        assert [event.name for event in events if event.name] == [
            "host", "enabled", "port", "user"
        ]
        assert events[-1] == Event.eof()

    def test_stdin(self, capsys):
        """Test ``-`` reads events from stdin."""
        with patch("sys.stdin", io.StringIO(dumps_events(HOST_EVENTS))):
            exit_code = main(["emit", "-"])

        assert exit_code == 0
        assert capsys.readouterr().out.startswith('host "example1"')


class TestMain:
    """Test exit codes and error reporting."""

    def test_main_no_args(self):
        """Test no command prints help and fails."""
        exit_code = main([])
        assert exit_code == 1

    def test_main_unknown_command(self):
        """Test argparse rejects unknown commands."""
        with pytest.raises(SystemExit):
            main(["unknown"])

    def test_main_malformed_events(self, capsys):
        """Test structural errors are reported with exit code 1."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".jsonl", delete=False) as f:
            f.write(dumps_events([Event.start_node("a"), Event.eof()]))
            path = Path(f.name)

        try:
            exit_code = main(["emit", str(path)])
        finally:
            path.unlink()

        assert exit_code == 1
        assert "Error: expected end_node, got eof" in capsys.readouterr().err

    def test_main_undecodable_line(self, capsys):
        """Test an undecodable event line is reported as a parse error."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".jsonl", delete=False) as f:
            f.write("not json\n")
            path = Path(f.name)

        try:
            exit_code = main(["print", str(path)])
        finally:
            path.unlink()

        assert exit_code == 1
        assert "line 1" in capsys.readouterr().err

    def test_main_missing_file(self, capsys):
        """Test a missing input file is reported."""
        exit_code = main(["emit", "does-not-exist.jsonl"])

        assert exit_code == 1
        assert "Error reading does-not-exist.jsonl" in capsys.readouterr().err

    def test_main_bad_config(self, capsys):
        """Test an invalid configuration file is reported."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({"emitter": {"indent": -1}}, f)
            config_path = Path(f.name)

        try:
            exit_code = main(["--config", str(config_path), "emit", "doc.jsonl"])
        finally:
            config_path.unlink()

        assert exit_code == 1
        assert "Error loading configuration" in capsys.readouterr().err

    @pytest.mark.parametrize("content", [
        {"builder": {"max_depth": "5"}},
        {"builder": 5},
    ])
    def test_main_wrongly_typed_config(self, content, capsys):
        """Test wrongly typed configuration values exit cleanly."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(content, f)
            config_path = Path(f.name)

        try:
            exit_code = main(["--config", str(config_path), "emit", "doc.jsonl"])
        finally:
            config_path.unlink()

        assert exit_code == 1
        assert "Error loading configuration" in capsys.readouterr().err

    def test_main_keyboard_interrupt(self, events_file):
        """Test handling keyboard interrupt."""
        with patch("kdl_document.cli.main.read_document", side_effect=KeyboardInterrupt):
            exit_code = main(["emit", str(events_file)])
        assert exit_code == 130
