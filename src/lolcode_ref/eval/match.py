"""Case dispatch for ``WTF?``: compare each ``OMG`` value against IT."""

from __future__ import annotations

from typing import Any, Callable, Optional

from lark import Tree

from ..runtime import LolValue, Scope
from ..tree import tree_children
from .blocks import ExecFunc, run_block_in_child

EvalFunc = Callable[[Any, Scope], LolValue]


def _select_case(n: Tree, scope: Scope, eval_func: EvalFunc) -> Optional[Tree]:
    *omgs, omgwtf = tree_children(n)

    for omg in omgs:
        case_expr, block = tree_children(omg)

        # Variant-sensitive: NUMBR 1 never matches NUMBAR 1.0.
        if eval_func(case_expr, scope) == scope.it:
            return block

    if omgwtf is not None:
        return tree_children(omgwtf)[0]

    return None

def eval_wtf(n: Tree, scope: Scope, eval_func: EvalFunc, exec_func: ExecFunc) -> None:
    block = _select_case(n, scope, eval_func)

    # GTFO and FOUND YR end the chosen case only; they never leave the WTF?.
    if block is not None:
        run_block_in_child(block, scope, exec_func)

    return None
