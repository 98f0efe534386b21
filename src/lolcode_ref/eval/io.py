from __future__ import annotations

import sys
from typing import Any, Callable

from lark import Tree

from ..runtime import InputReadError, LolValue, LolYarn, Scope
from ..tree import tree_children
from .access import mutate_access
from .common import stringify

EvalFunc = Callable[[Any, Scope], LolValue]

def _write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()

def eval_visible(n: Tree, scope: Scope, eval_func: EvalFunc) -> None:
    *exprs, bang = tree_children(n)

    # Each piece goes out as soon as it is evaluated, so a later failure
    # leaves the earlier output in place.
    for idx, expr in enumerate(exprs):
        text = stringify(eval_func(expr, scope))
        _write(text if idx == 0 else " " + text)

    if bang is None:
        _write("\n")

    return None

def read_line() -> str:
    try:
        return sys.stdin.readline()
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise InputReadError(f"Could not read user input: {exc}") from exc

def eval_gimmeh(n: Tree, scope: Scope) -> None:
    target = tree_children(n)[0]
    line = read_line()
    mutate_access(scope, target, lambda _old: LolYarn(line))

    return None
