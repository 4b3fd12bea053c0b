# tests/test_cli.py
"""
Tests for the ``python -m odo`` front end.
"""

import io
import logging

import pytest

from odo.__main__ import EXIT_ERROR, EXIT_OK, main


class TestCommand:

    def test_debug_print(self, capsys):
        assert main(["-c", "var x = 1\n:x"]) == EXIT_OK
        assert capsys.readouterr().out == "int 1\n"

    def test_last_value_is_echoed(self, capsys):
        assert main(["-c", "var x = 1; x"]) == EXIT_OK
        assert capsys.readouterr().out == "int 1\n"

    def test_error_goes_to_stderr(self, capsys):
        assert main(["-c", "x"]) == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Unknown variable 'x'" in captured.err
        assert "<command>:1:1" in captured.err

    def test_prelude_installed_by_default(self, capsys):
        assert main(["-c", 'print("hi")']) == EXIT_OK
        assert capsys.readouterr().out == "hi\n"

    def test_no_prelude(self, capsys):
        assert main(["--no-prelude", "-c", 'print("hi")']) == EXIT_ERROR

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("odo ")


class TestDumps:

    def test_dump_ast(self, capsys):
        assert main(["--dump-ast", "-c", "var x = 1"]) == EXIT_OK
        assert capsys.readouterr().out == "(declare x (int 1))\n"

    def test_dump_semantic(self, capsys):
        assert main(["--dump-semantic", "-c", "var x = 1"]) == EXIT_OK
        assert capsys.readouterr().out.startswith("(declare x#")

    def test_dump_before_output(self, capsys):
        assert main(["--dump-ast", "-c", ":1"]) == EXIT_OK
        assert capsys.readouterr().out == "(debug-print (int 1))\nint 1\n"


class TestRepl:

    def test_state_persists_between_lines(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("var x = 1\n\nx = 2\n:x\n"))
        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == "int 2\n"

    def test_errors_do_not_end_the_session(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("nope\n:1\n"))
        assert main([]) == EXIT_OK
        captured = capsys.readouterr()
        assert "Unknown variable 'nope'" in captured.err
        assert captured.out == "int 1\n"

    def test_block_within_one_line(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("{ var x = true; :x }\n"))
        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == "truth true\n"


class TestLogging:

    def test_repeated_runs_share_one_handler(self, capsys):
        main(["-c", ":1"])
        main(["-v", "-c", ":2"])
        odo_logger = logging.getLogger("odo")
        assert len(odo_logger.handlers) == 1
        assert odo_logger.level == logging.INFO
        odo_logger.setLevel(logging.WARNING)
