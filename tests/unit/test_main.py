"""
Tests for the shaderdiag CLI: argument parsing, policy resolution,
and exit status derived from classified lines.
"""
import io
from unittest.mock import MagicMock, patch

import pytest
from shaderdiag.main import _build_parser, _resolve_policy, run
from shaderdiag.parsing import MessagePolicy


@pytest.fixture
def config():
    """A ConfigManager stand-in with every policy off."""
    mgr = MagicMock()
    mgr.policy.return_value = MessagePolicy()
    mgr.sources.return_value = []
    with patch("shaderdiag.main.ConfigManager", return_value=mgr):
        yield mgr


def _run(argv, stdin=""):
    with patch("sys.argv", ["shaderdiag"] + argv):
        with patch("sys.stdin", io.StringIO(stdin)):
            with pytest.raises(SystemExit) as exc:
                run()
    return exc.value.code


class TestArgParser:

    def test_defaults(self):
        args = _build_parser().parse_args([])
        assert args.file is None
        assert args.werror is False
        assert args.no_warnings is False
        assert args.sources == []
        assert args.watch is False

    def test_glslc_style_flags(self):
        args = _build_parser().parse_args(["-Werror", "-w", "build.log"])
        assert args.werror is True
        assert args.no_warnings is True
        assert args.file == "build.log"

    def test_repeated_sources(self):
        args = _build_parser().parse_args(["--source", "a.vert", "--source", "b.vert"])
        assert args.sources == ["a.vert", "b.vert"]


class TestResolvePolicy:

    def test_flags_turn_policy_on(self, config):
        args = _build_parser().parse_args(["-Werror"])
        assert _resolve_policy(args, config) == MessagePolicy(warnings_as_errors=True)

    def test_config_applies_without_flags(self, config):
        config.policy.return_value = MessagePolicy(suppress_warnings=True)
        args = _build_parser().parse_args([])
        assert _resolve_policy(args, config) == MessagePolicy(suppress_warnings=True)


class TestRunExitStatus:

    def test_clean_output_exits_zero(self, config, capsys):
        assert _run([], stdin="Linking...\n") == 0
        assert "Linking..." in capsys.readouterr().out

    def test_warning_exits_zero(self, config, capsys):
        assert _run([], stdin="WARNING: 0:3: unused\n") == 0
        assert "0:3: warning: unused" in capsys.readouterr().out

    def test_error_exits_one(self, config, capsys):
        assert _run([], stdin="ERROR: 0:2: '#' : invalid directive: foo\n") == 1
        assert "0:2: error: '#' : invalid directive: foo" in capsys.readouterr().out

    def test_werror_promotes(self, config):
        assert _run(["-Werror"], stdin="WARNING: 12a\n") == 1

    def test_suppressed_warning_passes_through(self, config, capsys):
        assert _run(["-w", "-Werror"], stdin="WARNING: 0:1: meh\n") == 0
        assert "WARNING: 0:1: meh" in capsys.readouterr().out

    def test_sources_rename_segments(self, config, capsys):
        _run(["--source", "common.glsl", "--source", "main.frag"], stdin="ERROR: 1:7: oops\n")
        assert "main.frag:7: error: oops" in capsys.readouterr().out

    def test_sources_from_config(self, config, capsys):
        config.sources.return_value = ["from_config.frag"]
        _run([], stdin="ERROR: 0:7: oops\n")
        assert "from_config.frag:7: error: oops" in capsys.readouterr().out


class TestRunFiles:

    def test_reads_log_file(self, config, tmp_path):
        log = tmp_path / "build.log"
        log.write_text("ERROR: too many functions\n")
        assert _run([str(log)]) == 1

    def test_missing_file(self, config, capsys):
        assert _run(["/nonexistent/build.log"]) == 1
        captured = capsys.readouterr()
        assert "File not found" in captured.err
        assert captured.out == ""

    def test_watch_needs_file(self, config, capsys):
        assert _run(["--watch"]) == 1
        assert "--watch needs a log file" in capsys.readouterr().err

    def test_invalid_utf8_log_is_classified(self, config, tmp_path, capsys):
        log = tmp_path / "build.log"
        log.write_bytes(b"ERROR: 0:2: bad \xff\xfe token\n")
        assert _run([str(log)]) == 1
        assert "0:2: error: bad \ufffd\ufffd token" in capsys.readouterr().out

    def test_body_keeps_unicode_line_separator(self, config, tmp_path, capsys):
        log = tmp_path / "build.log"
        log.write_text("ERROR: 0:2: 'a\u2028b' : undeclared identifier\n", encoding="utf-8")
        assert _run([str(log)]) == 1
        out = capsys.readouterr().out
        assert out.count("\n") == 1
        assert "b' : undeclared identifier" in out
        assert "error: 'a" in out

    def test_watch_runs_until_interrupted(self, config, tmp_path):
        log = tmp_path / "build.log"
        log.write_text("")
        with patch("shaderdiag.main._watch") as mock_watch:
            assert _run(["--watch", str(log)]) == 0
        mock_watch.assert_called_once_with(str(log), MessagePolicy(), [])

    def test_watch_accepts_log_not_written_yet(self, config, tmp_path):
        log = tmp_path / "later.log"
        with patch("shaderdiag.main._watch") as mock_watch:
            assert _run(["--watch", str(log)]) == 0
        mock_watch.assert_called_once_with(str(log), MessagePolicy(), [])

    def test_watch_missing_directory(self, config, capsys):
        with patch("shaderdiag.main._watch") as mock_watch:
            assert _run(["--watch", "/nonexistent/dir/build.log"]) == 1
        mock_watch.assert_not_called()
        assert "Directory not found" in capsys.readouterr().err

    def test_watch_loop_stops_engine(self, tmp_path):
        from shaderdiag.main import _watch
        engine = MagicMock()
        with patch("shaderdiag.main.DiagnosticEngine", return_value=engine):
            with patch("shaderdiag.main.time.sleep", side_effect=KeyboardInterrupt):
                _watch(str(tmp_path / "build.log"), MessagePolicy(), [])
        engine.start.assert_called_once()
        engine.stop.assert_called_once()
