from __future__ import annotations

from typing import Any, Callable, Optional

from lark import Tree

from ..runtime import InvalidType, LolBukkit, LolNoob, LolRuntimeError, LolValue, Scope, default_value, type_name
from ..tree import tree_children, tree_label
from .access import mutate_access, resolve_access
from .common import expect_ident_token

EvalFunc = Callable[[Any, Scope], LolValue]

__all__ = [
    "eval_declaration",
    "eval_assignment",
    "eval_bukkit_set_slot",
]

def _initial_value(init: Optional[Tree], scope: Scope, eval_func: EvalFunc) -> LolValue:
    if init is None:
        return LolNoob()

    payload = tree_children(init)[0]

    match tree_label(init):
        case 'itz':
            return eval_func(payload, scope)
        case 'itz_a':
            return default_value(str(payload))

    raise LolRuntimeError(f"Unknown initializer {tree_label(init)}")

def eval_declaration(n: Tree, scope: Scope, eval_func: EvalFunc) -> None:
    name_node, init = tree_children(n)
    name = expect_ident_token(name_node, "Declaration target")
    scope.declare(name, _initial_value(init, scope, eval_func))

    return None

def eval_assignment(n: Tree, scope: Scope, eval_func: EvalFunc) -> None:
    target, value_node = tree_children(n)
    value = eval_func(value_node, scope)
    mutate_access(scope, target, lambda _old: value)

    return None

def eval_bukkit_set_slot(n: Tree, scope: Scope, eval_func: EvalFunc) -> None:
    target, slot_node, value_node = tree_children(n)
    slot = expect_ident_token(slot_node, "Slot name")
    handle = resolve_access(scope, target)
    value = eval_func(value_node, scope)
    bukkit = handle.value

    if not isinstance(bukkit, LolBukkit):
        raise InvalidType(f"Cannot set slot '{slot}' on {type_name(bukkit)}")

    bukkit.slots[slot] = value

    return None
