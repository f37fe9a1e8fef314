import io

import pytest

from qlisp.interpreter import Interpreter
from qlisp.repl import Repl
from qlisp.types.errors import QLispSyntaxError
from qlisp.types.value import Number


def test_definitions_persist_across_calls(interp):
    interp.eval("def {x y} 3 4")
    assert interp.eval("+ x y") == Number(7)


def test_eval_to_string(interp):
    assert interp.eval_to_string("list 1 2 (+ 1 2)") == "{1 2 3}"
    assert interp.eval_to_string("def {a} 1") == "()"
    assert interp.eval_to_string("(/ 1 0)") == "Error: Division by zero"
    assert interp.eval_to_string("first") == "<function>"


def test_syntax_error_propagates(interp):
    with pytest.raises(QLispSyntaxError):
        interp.eval("(+ 1")


def test_prelude_runs_line_by_line():
    interp = Interpreter(prelude="""
        def {one} 1
        ; a comment line
        (def {two} (+ one one))
    """)
    assert interp.eval("list one two") == interp.eval("{1 2}")


def test_separate_interpreters_do_not_share_bindings():
    a, b = Interpreter(), Interpreter()
    a.eval("def {x} 1")
    assert b.eval_to_string("x") == "Error: Unbound symbol 'x'"


def test_repl_session(monkeypatch):
    monkeypatch.setenv("QLISP_PROMPT", "> ")
    lines = iter(["def {x} 10", "x", "(+ x", "eval {- x}"])
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    out = io.StringIO()
    Repl(output=out, read_line=read_line).run()
    text = out.getvalue().splitlines()
    assert text[0].startswith("qlisp version ")
    assert text[3:7] == ["()", "10", "<stdin>:1:1: Unmatched '('", "-10"]
    assert prompts == ["> "] * 5


def test_repl_stops_on_keyboard_interrupt():
    def read_line(prompt):
        raise KeyboardInterrupt

    out = io.StringIO()
    Repl(output=out, read_line=read_line).run()
    assert "Press Ctrl+C to exit" in out.getvalue()


def _feed(*inputs):
    lines = iter(inputs)

    def read_line(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    return read_line


def test_repl_survives_deep_nesting():
    deep = "(" * 5000 + "5" + ")" * 5000
    out = io.StringIO()
    Repl(output=out, read_line=_feed(deep, "+ 1 2")).run()
    text = out.getvalue().splitlines()
    assert text[3:5] == ["<stdin>: expression nested too deeply", "3"]


def test_repl_survives_runaway_eval():
    out = io.StringIO()
    Repl(output=out, read_line=_feed("def {f} {eval f}", "eval f", "def {x} 1", "x")).run()
    text = out.getvalue().splitlines()
    assert text[3:7] == ["()", "<stdin>: expression nested too deeply", "()", "1"]


def test_unreadable_history_is_not_fatal(monkeypatch, tmp_path):
    import qlisp.repl as repl_module

    class BrokenReadline:
        @staticmethod
        def read_history_file(path):
            raise PermissionError(13, "Permission denied", path)

    monkeypatch.setenv("QLISP_HISTORY_FILE", str(tmp_path / "history"))
    monkeypatch.setattr(repl_module, "readline", BrokenReadline)
    repl_module._load_history()
