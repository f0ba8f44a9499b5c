"""Tests for the Typer CLI: repl transcript, eval, tokens."""

import json

import pytest
from typer.testing import CliRunner

from infixcalc.__main__ import app
from infixcalc.config import Settings
from infixcalc.models import FlushPolicy
from infixcalc.repl import EVAL_ERROR_LINE, PARSE_ERROR_LINE, evaluate_line


def _strict_json(text):
    """Parse JSON, rejecting the NaN/Infinity literals strict parsers refuse."""
    def _reject(constant):
        raise ValueError(f"non-standard JSON constant: {constant}")
    return json.loads(text, parse_constant=_reject)


@pytest.fixture
def runner():
    return CliRunner()


# --- repl ---

def test_repl_transcript(runner):
    lines = "2+3*4\n  (2+3)*4  \n2+#3\n((2+3)\n2-(3*4+5)\n1/0\n\n"
    result = runner.invoke(app, ["repl"], input=lines)
    assert result.exit_code == 0, result.output
    assert "Simple math expression evaluator v 0.1" in result.output
    assert "blank line to exit" in result.output
    assert "(result): 14" in result.output
    assert "(result): 20" in result.output
    assert result.output.count(PARSE_ERROR_LINE) == 2
    assert EVAL_ERROR_LINE in result.output
    assert "(result): inf" in result.output


def test_repl_stops_at_blank_line(runner):
    result = runner.invoke(app, ["repl"], input="1+1\n\n5*5\n")
    assert result.exit_code == 0
    assert "(result): 2" in result.output
    assert "(result): 25" not in result.output


def test_repl_stops_at_end_of_input(runner):
    result = runner.invoke(app, ["repl"], input="7/2\n")
    assert result.exit_code == 0
    assert "(result): 3.5" in result.output


def test_repl_standard_flag(runner):
    result = runner.invoke(app, ["repl", "--standard"], input="2-(3*4+5)\n\n")
    assert "(result): -15" in result.output


def test_repl_prompt_from_environment(runner):
    result = runner.invoke(app, ["repl"], input="\n", env={"INFIXCALC_PROMPT": "calc> "})
    assert "calc> " in result.output


def test_evaluate_line():
    settings = Settings()
    assert evaluate_line("2+3*4", settings) == "(result): 14"
    assert evaluate_line("2+", settings) == PARSE_ERROR_LINE
    assert evaluate_line("2-(3*4+5)", settings) == EVAL_ERROR_LINE
    assert evaluate_line("2-(3*4+5)", Settings(flush_policy=FlushPolicy.STANDARD)) == "(result): -15"


# --- eval ---

def test_eval_plain(runner):
    result = runner.invoke(app, ["eval", "2", "+", "3*4"])
    assert result.exit_code == 0
    assert result.output.strip() == "14"


def test_eval_json(runner):
    result = runner.invoke(app, ["eval", "--json", "(2+3)*4"])
    assert result.exit_code == 0
    assert _strict_json(result.stdout) == {"status": "ok", "finite": True, "result": 20.0}


def test_eval_reads_stdin(runner):
    result = runner.invoke(app, ["eval", "--json"], input="10/4\n")
    assert result.exit_code == 0
    assert _strict_json(result.stdout)["result"] == pytest.approx(2.5)


@pytest.mark.parametrize("text, expected", [
    ("1/0", "inf"),
    ("(1-2)/0", "-inf"),
    ("0/0", "nan"),
])
def test_eval_non_finite_json_is_strict(runner, text, expected):
    result = runner.invoke(app, ["eval", "--json", text])
    assert result.exit_code == 0
    assert "Infinity" not in result.stdout
    assert "NaN" not in result.stdout
    assert _strict_json(result.stdout) == {"status": "ok", "finite": False, "result": expected}


def test_eval_parse_error(runner):
    result = runner.invoke(app, ["eval", "2+"])
    assert result.exit_code == 2
    assert "operand_count" in result.output


def test_eval_lex_error_json(runner):
    result = runner.invoke(app, ["eval", "--json", "2+#3"])
    assert result.exit_code == 2
    payload = _strict_json(result.stdout)
    assert payload["status"] == "error"
    assert payload["stage"] == "parse"
    assert payload["error"] == "lex_error"
    assert payload["position"] == 2
    assert payload["char"] == "#"


def test_eval_evaluation_error_json(runner):
    result = runner.invoke(app, ["eval", "--json", "2-(3*4+5)"])
    assert result.exit_code == 2
    payload = _strict_json(result.stdout)
    assert payload["stage"] == "eval"
    assert payload["error"] == "bracket_in_postfix"


def test_eval_invalid_environment(runner):
    result = runner.invoke(app, ["eval", "1+1"], env={"INFIXCALC_FLUSH_POLICY": "bogus"})
    assert result.exit_code == 1


# --- tokens ---

def test_tokens_tables(runner):
    result = runner.invoke(app, ["tokens", "2+3*4"])
    assert result.exit_code == 0
    assert "Infix" in result.output
    assert "Postfix (legacy)" in result.output
    assert "number" in result.output
    assert "Result: 14" in result.output


def test_tokens_evaluation_error(runner):
    result = runner.invoke(app, ["tokens", "2-(3*4+5)"])
    assert result.exit_code == 2
    assert "bracket_in_postfix" in result.output


def test_tokens_parse_error(runner):
    result = runner.invoke(app, ["tokens", "2+#3"])
    assert result.exit_code == 2
    assert "lex_error" in result.output
