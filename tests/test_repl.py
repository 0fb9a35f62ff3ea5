from io import StringIO

import pytest

from gune.repl import BANNER, Repl, main


@pytest.fixture
def repl(interp):
    return Repl(interp, stdin=StringIO(), stdout=StringIO(), prompt="# ")


@pytest.mark.parametrize(
    "line,output",
    [
        ("2+3*4", "> 14"),
        ("  8-3-2 \n", "> 3"),
        ("nil", "> nil"),
        ("5/0", "! DivisionByZero: division by zero"),
        ("#", "! LexError: Unknown char '#' at 0"),
        ("y", "! UndefinedVariable: y undefined"),
        ("", ""),
        (":tokens 1+2", "Number('1')@0 BinaryOperator('+')@1 Number('2')@2 EOF('')@3"),
        (":env", "pi = 3.141592653589793"),
        (":foo", "! unknown command :foo"),
    ]
)
def test_handle(repl, line, output):
    assert repl.handle(line) == output


def test_quit_commands(repl):
    assert repl.handle(":q") is None
    assert repl.handle(":quit") is None


def test_ast_command(repl):
    assert repl.handle(":ast 1+x") == "Program\n  BinaryExpression +\n    NumericLiteral 1\n    Identifier x"
    assert repl.handle(":ast (1").startswith("! ParseError: ")


def test_loop_continues_after_failure(interp):
    out = StringIO()
    Repl(interp, stdin=StringIO("1+1\n#\n:q\n3\n"), stdout=out, prompt="# ").loop()
    assert out.getvalue() == f"\n{BANNER}\n# > 2\n# ! LexError: Unknown char '#' at 0\n# "


def test_loop_ends_at_eof(interp):
    out = StringIO()
    Repl(interp, stdin=StringIO("1\n"), stdout=out, prompt="> ").loop()
    assert out.getvalue() == f"\n{BANNER}\n> > 1\n> \n"


def test_main_command_success(capsys):
    assert main(["-c", "2*3"]) == 0
    assert capsys.readouterr().out == "6\n"


def test_main_command_failure(capsys):
    assert main(["-c", "1/0"]) == 1
    assert capsys.readouterr().err == "DivisionByZero: division by zero\n"


def test_main_without_constants(capsys):
    assert main(["--no-constants", "-c", "pi"]) == 1
    assert capsys.readouterr().err == "UndefinedVariable: pi undefined\n"


@pytest.mark.parametrize(
    "line,output",
    [
        (":sexpr 2+3*4", "(+ 2 (* 3 4))"),
        (":sexpr 8-3-2 x", "(- (- 8 3) 2) x"),
        (":sexpr (1", "! ParseError: Expected CloseParen but found 'EOF' at 2"),
    ]
)
def test_sexpr_command(repl, line, output):
    assert repl.handle(line) == output


def test_loop_survives_long_and_deep_lines(interp):
    out = StringIO()
    lines = ["+".join(["1"] * 1500), "(" * 500 + "1" + ")" * 500, "1+1", ":q"]
    Repl(interp, stdin=StringIO("\n".join(lines) + "\n"), stdout=out, prompt="# ").loop()
    assert out.getvalue().splitlines()[2:] == [
        "# > 1500",
        "# ! NestingTooDeep: Parentheses nest deeper than 128 levels at 128",
        "# > 2",
        "# ",
    ]


def test_main_rejects_unknown_log_level(capsys):
    with pytest.raises(SystemExit):
        main(["--log-level", "bogus", "-c", "1"])
    assert "--log-level" in capsys.readouterr().err


def test_main_accepts_lowercase_log_level(capsys):
    assert main(["--log-level", "debug", "-c", "1+1"]) == 0
    assert capsys.readouterr().out == "2\n"
