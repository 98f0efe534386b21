from __future__ import annotations

from typing import Any, Callable, Optional

from ..runtime import LolNoob, LolRuntimeError, LolValue, Scope
from ..tree import is_tree, tree_children, tree_label

ExecFunc = Callable[[Any, Scope], Optional[LolValue]]

def run_block(block: Any, scope: Scope, exec_func: ExecFunc) -> Optional[LolValue]:
    """Run a block's statements in order; return the first early-return value."""
    if not is_tree(block) or tree_label(block) != 'block':
        raise LolRuntimeError("Malformed block")

    for stmt in tree_children(block):
        signal = exec_func(stmt, scope)
        if signal is not None:
            return signal

    return None

def execute_block(block: Any, scope: Scope, exec_func: ExecFunc) -> LolValue:
    signal = run_block(block, scope, exec_func)

    return LolNoob() if signal is None else signal

def run_block_in_child(block: Any, scope: Scope, exec_func: ExecFunc) -> Optional[LolValue]:
    return run_block(block, scope.child(), exec_func)
