from __future__ import annotations

import io
import sys
from contextlib import redirect_stdout
from textwrap import dedent

import pytest

from lolcode_ref.runner import run
from tests.support.harness import (
    IdentifierNotFound,
    InputReadError,
    run_program,
    run_runtime_case,
    verify_value,
)

SCENARIOS = [
    pytest.param(
        "I HAS A x\nGIMMEH x\nVISIBLE x!",
        "hello\n",
        None,
        "hello\n",
        id="gimmeh-keeps-newline",
    ),
    pytest.param(
        "I HAS A x, GIMMEH x, VISIBLE SMOOSH \"[\" AN x AN \"]\" MKAY",
        "[]\n",
        None,
        "",
        id="gimmeh-at-eof",
    ),
    pytest.param(
        "GIMMEH missing",
        None,
        IdentifierNotFound,
        "ignored\n",
        id="gimmeh-undeclared",
    ),
    pytest.param(
        dedent(
            """\
            I HAS A a
            I HAS A b
            GIMMEH a
            GIMMEH b
            VISIBLE b!
            VISIBLE a!
        """
        ),
        "second\nfirst\n",
        None,
        "first\nsecond\n",
        id="gimmeh-reads-in-order",
    ),
]


@pytest.mark.parametrize("source, expected_output, expected_exc, stdin", SCENARIOS)
def test_io(source: str, expected_output, expected_exc, stdin: str) -> None:
    run_runtime_case(source, expected_output, expected_exc, stdin=stdin)


def test_gimmeh_stores_yarn() -> None:
    _, scope = run_program("I HAS A n ITZ 1\nGIMMEH n", stdin="42\n")

    verify_value(scope.get("n"), "yarn", "42\n")


class _BrokenStdin(io.StringIO):
    def readline(self, *args, **kwargs) -> str:
        raise OSError("stdin closed")


def test_gimmeh_read_failure_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "stdin", _BrokenStdin())

    with pytest.raises(InputReadError):
        run("I HAS A x\nGIMMEH x")


def test_output_before_failure_is_kept() -> None:
    out = io.StringIO()

    with redirect_stdout(out), pytest.raises(IdentifierNotFound):
        run('VISIBLE "first"\nVISIBLE nope\nVISIBLE "never"')

    assert out.getvalue() == "first\n"


def test_visible_pieces_written_before_failing_operand() -> None:
    out = io.StringIO()

    with redirect_stdout(out), pytest.raises(IdentifierNotFound):
        run('VISIBLE "a" "b" nope')

    assert out.getvalue() == "a b"
