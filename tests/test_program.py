"""Tests for the reporter, the program wrapper and the tli entry point."""

import io

import pytest

import tli
from tl.interpreter import Interpreter
from tl.parser import Parser
from tl.reporter import DivisionByZero, ParseError, Reporter, TLError, UndefinedName


def test_error_text_carries_kind_and_position():
    error = UndefinedName("variable {x} is not defined").locate(3, 9)
    assert str(error) == "undefined name: line 3, column 9: variable {x} is not defined"


def test_locate_keeps_the_innermost_position():
    error = ParseError("oops", 1, 2).locate(5, 6)
    assert (error.line, error.column) == (1, 2)
    assert str(TLError("no position")) == "error: no position"


def test_checkpoint_passes_when_clean():
    stream = io.StringIO()
    reporter = Reporter(stream)
    reporter.checkpoint("parsing")
    assert reporter.section == "parsing"
    assert stream.getvalue() == ""


def test_checkpoint_crashes_on_backlog():
    stream = io.StringIO()
    reporter = Reporter(stream)
    reporter.checkpoint("running")
    reporter.log(DivisionByZero("1 divided by zero", 2, 7))
    with pytest.raises(SystemExit) as info:
        reporter.checkpoint("end")
    assert info.value.code == 1
    text = stream.getvalue()
    assert "=== Error backlog ===" in text
    assert "[ Error ] {running}" in text
    assert "division by zero: line 2, column 7" in text
    assert "[ Fatal Error ]" in text


def test_program_run_without_reporter_raises(parser):
    prgm = parser.to_prgm("print(1 / 0);")
    with pytest.raises(DivisionByZero):
        prgm.run(Interpreter(stdout=io.StringIO()))


def test_program_run_with_reporter_crashes():
    stream = io.StringIO()
    prgm = Parser(Reporter(stream)).to_prgm("print(nope);")
    with pytest.raises(SystemExit):
        prgm.run(Interpreter(stdout=io.StringIO()))
    assert "undefined name" in stream.getvalue()


def test_program_pprint_lists_statements(parser):
    text = parser.to_prgm("int x = 1;\nprint(x);").pprint()
    assert text.splitlines() == [
        "line 1: declaration of int {x} with value {1}",
        "line 2: printing of {x}",
    ]


@pytest.fixture
def source_file(tmp_path):
    def _write(text: str, name: str = "prog.tl"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return _write


def test_main_runs_the_program(source_file, capsys):
    tli.main([source_file("int a = 6; print(a * 7);")])
    out, err = capsys.readouterr()
    assert out == "42\n"


def test_main_prints_statements_with_ast_flag(source_file, capsys):
    tli.main([source_file("print(1);"), "--ast"])
    out, _ = capsys.readouterr()
    assert out == "line 1: printing of {1}\n"


def test_main_warns_on_other_extensions(source_file, capsys):
    tli.main([source_file("print(1);", name="prog.txt")])
    out, err = capsys.readouterr()
    assert out == "1\n"
    assert "[ Warning ]" in err
    assert "expected '.tl' file" in err


def test_main_reports_parse_errors(source_file, capsys):
    with pytest.raises(SystemExit) as info:
        tli.main([source_file("print(1)")])
    assert info.value.code == 1
    _, err = capsys.readouterr()
    assert "[ Fatal Error ] | {parsing}" in err
    assert "parse error: line 1" in err


def test_main_reports_runtime_errors_after_output(source_file, capsys):
    with pytest.raises(SystemExit):
        tli.main([source_file("print(1);\nprint(2 / 0);")])
    out, err = capsys.readouterr()
    assert out == "1\n"
    assert "[ Error ] {running}" in err
    assert "division by zero: line 2" in err


def test_main_reports_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        tli.main([str(tmp_path / "missing.tl")])
    _, err = capsys.readouterr()
    assert "cannot read" in err


def test_main_reports_binary_source(tmp_path, capsys):
    path = tmp_path / "blob.tl"
    path.write_bytes(b"\xff\xfe\x00\x81")
    with pytest.raises(SystemExit):
        tli.main([str(path)])
    _, err = capsys.readouterr()
    assert "not a text file" in err
