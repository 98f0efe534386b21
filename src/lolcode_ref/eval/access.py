"""Variable resolution: scope-chain lookup, SRS indirection and slot traversal.

A ``var_access`` node is ``var_access(head, *slots)`` where ``head`` is
``ident(NAME)`` or ``srs(NAME)`` and every slot is a ``NAME`` token from a
``'Z`` step. Resolution first finds the scope that owns the binding, then
walks the slots through nested bukkits.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from lark import Tree

from ..runtime import (
    CannotSRSNonYarn,
    IdentifierNotFound,
    InvalidType,
    LolBukkit,
    LolRuntimeError,
    LolValue,
    LolYarn,
    Scope,
    clone_value,
    type_name,
)
from ..tree import is_tree, tree_children, tree_label
from .common import expect_ident_token

Mutator = Callable[[LolValue], LolValue]

__all__ = [
    "AccessHandle",
    "access_path",
    "mutate_access",
    "read_access",
    "resolve_access",
    "resolve_binding",
]

class AccessHandle:
    """Exclusive handle on one storage slot: a scope binding or a bukkit slot."""
    __slots__ = ("container", "key")

    def __init__(self, container: Dict[str, LolValue], key: str) -> None:
        self.container = container
        self.key = key

    @property
    def value(self) -> LolValue:
        return self.container[self.key]

    def replace(self, new_value: LolValue) -> None:
        self.container[self.key] = new_value

def access_path(node: Tree) -> Tuple[str, bool, List[str]]:
    """Split a var_access node into (base name, is_srs, slot names)."""
    if not is_tree(node) or tree_label(node) != 'var_access':
        raise LolRuntimeError("Malformed variable access")

    head, *slot_nodes = tree_children(node)
    label = tree_label(head)

    if label not in {'ident', 'srs'}:
        raise LolRuntimeError("Malformed identifier in variable access")

    name = expect_ident_token(tree_children(head)[0], "Variable name")
    slots = [expect_ident_token(slot, "Slot name") for slot in slot_nodes]

    return name, label == 'srs', slots

def resolve_binding(scope: Scope, name: str, is_srs: bool) -> Tuple[Scope, str]:
    """Find the scope owning ``name``; with SRS, dereference its YARN once more."""
    owner = scope.find(name)
    if owner is None:
        raise IdentifierNotFound(name)

    if not is_srs:
        return owner, name

    pointer = owner.vars[name]
    if not isinstance(pointer, LolYarn):
        raise CannotSRSNonYarn(name, pointer)

    # The second walk starts where the first lookup succeeded.
    target = owner.find(pointer.value)
    if target is None:
        raise IdentifierNotFound(pointer.value)

    return target, pointer.value

def _descend(handle: AccessHandle, slot: str) -> AccessHandle:
    current = handle.value

    if not isinstance(current, LolBukkit):
        raise InvalidType(f"Cannot read slot '{slot}' of {type_name(current)}")

    if slot not in current.slots:
        raise InvalidType(f"BUKKIT has no slot '{slot}'")

    return AccessHandle(current.slots, slot)

def resolve_access(scope: Scope, node: Tree) -> AccessHandle:
    name, is_srs, slots = access_path(node)
    owner, resolved = resolve_binding(scope, name, is_srs)
    handle = AccessHandle(owner.vars, resolved)

    for slot in slots:
        handle = _descend(handle, slot)

    return handle

def mutate_access(scope: Scope, node: Tree, mutator: Mutator) -> LolValue:
    """Replace the target with ``mutator(old)``; nothing is written if it raises."""
    handle = resolve_access(scope, node)
    new_value = mutator(handle.value)
    handle.replace(new_value)

    return new_value

def read_access(scope: Scope, node: Tree) -> LolValue:
    return clone_value(resolve_access(scope, node).value)
