from __future__ import annotations

from textwrap import dedent

import pytest
from lark import Token

from lolcode_ref.parser import unescape_yarn
from tests.support.harness import (
    ParseError,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param('VISIBLE "hai world"', "hai world\n", None, id="plain"),
    pytest.param('VISIBLE "a" 1 2.5 WIN NOOB', "a 1 2.5 true NOOB\n", None, id="space-separated"),
    pytest.param('VISIBLE "a"!\nVISIBLE "b"', "ab\n", None, id="bang-suppresses-newline"),
    pytest.param('VISIBLE "line:)next"', "line\nnext\n", None, id="escape-newline"),
    pytest.param('VISIBLE "a:>b"', "a\tb\n", None, id="escape-tab"),
    pytest.param('VISIBLE "say :"hi:""', 'say "hi"\n', None, id="escape-quote"),
    pytest.param('VISIBLE "a::b"', "a:b\n", None, id="escape-colon"),
    pytest.param('VISIBLE ":(41):(263A)"', "A☺\n", None, id="escape-code-point"),
    pytest.param('VISIBLE ":[LATIN SMALL LETTER A]"', "a\n", None, id="escape-unicode-name"),
    pytest.param('VISIBLE ":[NOT A REAL NAME]"', None, ParseError, id="escape-unknown-name"),
    pytest.param('VISIBLE ":{var}"', None, ParseError, id="interpolation-rejected"),
    pytest.param('VISIBLE ":q"', None, ParseError, id="escape-unknown"),
    pytest.param("VISIBLE 0.1", "0.1\n", None, id="numbar-shortest"),
    pytest.param("VISIBLE 100.0", "100\n", None, id="numbar-integral"),
    pytest.param("VISIBLE -2.25", "-2.25\n", None, id="numbar-negative"),
    pytest.param(
        dedent(
            """\
            I HAS A greeting ITZ SMOOSH "hai" AN " " AN "world" MKAY
            VISIBLE greeting
        """
        ),
        "hai world\n",
        None,
        id="smoosh-into-variable",
    ),
]


@pytest.mark.parametrize("source, expected_output, expected_exc", SCENARIOS)
def test_strings(source: str, expected_output, expected_exc) -> None:
    run_runtime_case(source, expected_output, expected_exc)


def test_unescape_plain_text_untouched() -> None:
    assert unescape_yarn("no escapes here") == "no escapes here"


def test_unescape_error_carries_position() -> None:
    tok = Token("STRING", '":{x}"', line=4, column=9)

    with pytest.raises(ParseError) as exc_info:
        unescape_yarn(":{x}", tok)

    assert exc_info.value.line == 4
    assert exc_info.value.column == 9
