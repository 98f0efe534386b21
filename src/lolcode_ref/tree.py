"""Shared helpers for working with the lark Tree/Token nodes of the AST."""
from __future__ import annotations

from typing import List, Optional, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Union[Tree, Token]


def is_tree(node: object) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: object) -> TypeGuard[Token]:
    return isinstance(node, Token)

def token_kind(node: object) -> Optional[str]:
    if not is_token(node):
        return None

    return str(node.type)

def tree_label(node: object) -> Optional[str]:
    return str(node.data) if is_tree(node) else None

def tree_children(node: object) -> List[Optional[Node]]:
    if not is_tree(node):
        return []

    return list(node.children)

def node_meta(node: object) -> Optional[object]:
    if not is_tree(node):
        return None

    meta = node.meta

    if getattr(meta, "empty", True):
        return None

    return meta

def node_position(node: object) -> tuple[Optional[int], Optional[int]]:
    """Best-effort (line, column) for a node; tokens carry their own position."""
    if is_token(node):
        return getattr(node, "line", None), getattr(node, "column", None)

    meta = node_meta(node)
    if meta is None:
        return None, None

    return getattr(meta, "line", None), getattr(meta, "column", None)
