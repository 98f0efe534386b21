from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import pytest
from rich.logging import RichHandler

from lolcode_ref.runner import TRACE_ENV_VAR, err_console, main, run_file
from tests.support.harness import verify_value

HELLO = 'HAI 1.2\nVISIBLE "O HAI"\nKTHXBYE\n'


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_run_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "hello.lol", HELLO)

    assert main(["run", str(path)]) == 0
    assert capsys.readouterr().out == "O HAI\n"


def test_default_command_is_run(feed_stdin, capsys: pytest.CaptureFixture[str]) -> None:
    feed_stdin(HELLO)

    assert main([]) == 0
    assert capsys.readouterr().out == "O HAI\n"


def test_run_reads_stdin(feed_stdin, capsys: pytest.CaptureFixture[str]) -> None:
    feed_stdin('VISIBLE SUM OF 1 AN 2\n')

    assert main(["run", "-"]) == 0
    assert capsys.readouterr().out == "3\n"


def test_ast_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "hello.lol", HELLO)

    assert main(["ast", str(path)]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "program"
    assert "visible" in out


def test_runtime_error_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "bad.lol", 'VISIBLE "before"\nVISIBLE nope\n')

    assert main(["run", str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == "before\n"
    assert captured.err.startswith("Error: Identifier 'nope' not found")
    assert "Python traceback" not in captured.err


def test_parse_error_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "bad.lol", "I HAS A 5\n")

    assert main(["run", str(path)]) == 1
    assert capsys.readouterr().err.startswith("Error: Unexpected")


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["run", str(tmp_path / "nope.lol")]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_traceback_env_var(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(TRACE_ENV_VAR, "1")
    path = _write(tmp_path, "bad.lol", "VISIBLE QUOSHUNT OF 1 AN 0\n")

    assert main(["run", str(path)]) == 1
    assert "Python traceback:" in capsys.readouterr().err


def test_verbose_flag_accepted(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "hello.lol", HELLO)

    assert main(["-v", "run", str(path)]) == 0
    assert capsys.readouterr().out == "O HAI\n"


@pytest.mark.parametrize(
    "argv, level",
    [
        pytest.param(["-v", "ast"], logging.DEBUG, id="verbose"),
        pytest.param(["ast"], logging.WARNING, id="quiet"),
    ],
)
def test_logging_uses_rich_handler_on_stderr(
    argv: List[str],
    level: int,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: List[Dict[str, Any]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    path = _write(tmp_path, "hello.lol", HELLO)

    assert main(argv + [str(path)]) == 0

    (config,) = calls
    (handler,) = config["handlers"]
    assert config["level"] == level
    assert isinstance(handler, RichHandler)
    assert handler.console is err_console
    assert err_console.stderr


def test_run_file_returns_scope(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "vars.lol", "I HAS A x ITZ SUM OF 2 AN 3\nVISIBLE x\n")

    scope = run_file(str(path))

    assert capsys.readouterr().out == "5\n"
    verify_value(scope.get("x"), "numbr", 5)
