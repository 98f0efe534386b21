from __future__ import annotations

from typing import Any, Callable

from lark import Tree

from ..runtime import LolNoob, LolValue, Scope
from ..tree import node_position, tree_children, tree_label

EvalFunc = Callable[[Any, Scope], LolValue]

def eval_found_yr(n: Tree, scope: Scope, eval_func: EvalFunc) -> LolValue:
    return eval_func(tree_children(n)[0], scope)

def eval_gtfo(_n: Tree, _scope: Scope) -> LolValue:
    return LolNoob()

def eval_expr_stmt(n: Tree, scope: Scope, eval_func: EvalFunc) -> None:
    scope.it = eval_func(tree_children(n)[0], scope)

    return None

def eval_unimplemented(n: Tree, _scope: Scope) -> Any:
    """Functions and casts are parsed but have no runtime semantics yet."""
    line, _ = node_position(n)
    where = f" (line {line})" if line is not None else ""

    raise NotImplementedError(f"{tree_label(n)} is not supported by this interpreter{where}")
