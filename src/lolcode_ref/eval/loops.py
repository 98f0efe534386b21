from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from lark import Tree

from ..runtime import InvalidType, LolNumbar, LolNumbr, LolRuntimeError, LolValue, Scope, type_name
from ..tree import tree_children, tree_label
from .access import mutate_access
from .blocks import ExecFunc, run_block, run_block_in_child
from .helpers import is_truthy

logger = logging.getLogger(__name__)

EvalFunc = Callable[[Any, Scope], LolValue]

_STEP_DELTAS = {'uppin': 1, 'nerfin': -1}

def step_numeric(value: LolValue, delta: int) -> LolValue:
    match value:
        case LolNumbr(value=num):
            return LolNumbr(num + delta)
        case LolNumbar(value=num):
            return LolNumbar(num + delta)

    raise InvalidType(f"Cannot step a {type_name(value)} loop variable")

def _loop_should_continue(cond: Optional[Tree], scope: Scope, eval_func: EvalFunc) -> bool:
    if cond is None:
        return True

    label = tree_label(cond)
    value = eval_func(tree_children(cond)[0], scope)

    match label:
        case 'til':
            return not is_truthy(value)
        case 'wile':
            return is_truthy(value)

    raise LolRuntimeError(f"Unknown loop condition {label}")

def eval_loop(n: Tree, scope: Scope, eval_func: EvalFunc, exec_func: ExecFunc) -> Optional[LolValue]:
    label, step, cond, body, _ = tree_children(n)
    loop_scope = scope.child()
    iterations = 0

    while _loop_should_continue(cond, loop_scope, eval_func):
        signal = run_block(body, loop_scope, exec_func)
        if signal is not None:
            logger.debug("Loop %s left after %d iteration(s)", label, iterations)
            return signal

        iterations += 1

        if step is not None:
            delta = _STEP_DELTAS[tree_label(step)]
            target = tree_children(step)[0]
            mutate_access(loop_scope, target, lambda old: step_numeric(old, delta))

    logger.debug("Loop %s finished after %d iteration(s)", label, iterations)

    return None

def eval_o_rly(n: Tree, scope: Scope, eval_func: EvalFunc, exec_func: ExecFunc) -> Optional[LolValue]:
    ya_rly, *mebbes, no_wai = tree_children(n)

    if ya_rly is not None and is_truthy(scope.it):
        return run_block_in_child(tree_children(ya_rly)[0], scope, exec_func)

    for mebbe in mebbes:
        guard, block = tree_children(mebbe)

        if is_truthy(eval_func(guard, scope)):
            return run_block_in_child(block, scope, exec_func)

    if no_wai is not None:
        # NO WAI runs directly in the enclosing scope, unlike the other branches.
        return run_block(tree_children(no_wai)[0], scope, exec_func)

    return None
