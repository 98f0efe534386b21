"""Interactive REPL for LOLCODE, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from typing import Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .eval.common import stringify
from .evaluator import execute_program
from .parser import ParseError, parse_source
from .runner import TRACE_ENV_VAR, report_error, debug_py_trace_enabled
from .runtime import LolNoob, LolRuntimeError, LolValue, Scope
from .tree import tree_children, tree_label

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

# Keywords that open a block and the ones that close it again.
_OPENER_RE = re.compile(r"\b(IM[ \t]+IN[ \t]+YR|O[ \t]+RLY\?|WTF\?|HOW[ \t]+IZ[ \t]+I|OBTW)")
_CLOSER_RE = re.compile(r"\b(IM[ \t]+OUTTA[ \t]+YR|OIC|IF[ \t]+U[ \t]+SAY[ \t]+SO|TLDR)\b")
_STRING_RE = re.compile(r'"(:.|[^":\n])*"')
_COMMENT_RE = re.compile(r"\bBTW\b.*$", re.M)


def open_block_depth(text: str) -> int:
    """Number of blocks still waiting for their closing keyword."""
    code = _COMMENT_RE.sub("", _STRING_RE.sub('""', text))
    depth = len(_OPENER_RE.findall(code)) - len(_CLOSER_RE.findall(code))

    return max(depth, 0)


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str, scope_box: list[Scope]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[TRACE_ENV_VAR] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(TRACE_ENV_VAR, None)
        elif arg == "":
            if debug_py_trace_enabled():
                os.environ.pop(TRACE_ENV_VAR, None)
            else:
                os.environ[TRACE_ENV_VAR] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        scope_box[0] = Scope()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def repl_eval(text: str, scope: Scope) -> Tuple[Optional[LolValue], bool]:
    """Run one REPL entry; returns (IT, ended_with_expression)."""
    program = parse_source(text)
    execute_program(program, scope)

    statements = tree_children(program)
    if statements and tree_label(statements[-1]) == 'expr_stmt':
        return scope.it, True

    return None, False


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the scope.
    scope_box: list[Scope] = [Scope()]

    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.startswith("/") or open_block_depth(text) == 0:
            buf.validate_and_handle()
            return

        indent = "  " * open_block_depth(text)
        buf.insert_text("\n" + indent)

    session: PromptSession[str] = PromptSession(
        history=history,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("lolcode repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, scope_box):
            continue

        try:
            result, was_expr = repl_eval(text, scope_box[0])
        except (ParseError, LolRuntimeError, NotImplementedError) as exc:
            sys.stdout.flush()
            report_error(exc)
            continue

        if was_expr and not isinstance(result, LolNoob):
            print(stringify(result))
