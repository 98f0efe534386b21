from __future__ import annotations

import logging
from typing import Callable, Optional

from lark import Token, Tree

from .runtime import LolRuntimeError, LolValue, Scope, clone_value
from .tree import Node, is_token, is_tree, node_position, tree_children, tree_label

from .eval.access import read_access
from .eval.bind import eval_assignment, eval_bukkit_set_slot, eval_declaration
from .eval.blocks import execute_block as _execute_block
from .eval.control import eval_expr_stmt, eval_found_yr, eval_gtfo, eval_unimplemented
from .eval.expr import (
    ARITHMETIC_OPS,
    BOOLEAN_OPS,
    COMPARE_OPS,
    EQUALITY_OPS,
    VARIADIC_OPS,
    eval_arithmetic,
    eval_boolean,
    eval_compare,
    eval_equality,
    eval_not,
    eval_smoosh,
    eval_variadic,
)
from .eval.io import eval_gimmeh, eval_visible
from .eval.literals import LITERAL_DISPATCH
from .eval.loops import eval_loop, eval_o_rly
from .eval.match import eval_wtf

logger = logging.getLogger(__name__)

ExprHandler = Callable[[Tree, Scope], LolValue]
StmtHandler = Callable[[Tree, Scope], Optional[LolValue]]

def _maybe_attach_location(exc: LolRuntimeError, node: Node) -> None:
    if exc.line is not None:
        return

    line, column = node_position(node)
    if line is None:
        return

    exc.line = line
    exc.column = column

# ---------------- Public API ----------------

def execute_program(program: Tree, scope: Optional[Scope]=None) -> Scope:
    """Run every top-level statement in order against one root scope."""
    if scope is None:
        scope = Scope()

    statements = tree_children(program) if tree_label(program) == 'program' else [program]
    logger.debug("Executing program with %d top-level statement(s)", len(statements))

    for stmt in statements:
        signal = exec_statement(stmt, scope)

        # Early returns at the top level only end their own statement.
        if signal is not None:
            logger.debug("Ignoring top-level early return %r", signal)

    return scope

def execute_block(block: Tree, scope: Scope) -> LolValue:
    return _execute_block(block, scope, exec_statement)

# ---------------- Statements ----------------

def exec_statement(n: Node, scope: Scope) -> Optional[LolValue]:
    try:
        return _exec_statement_inner(n, scope)
    except LolRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def _exec_statement_inner(n: Node, scope: Scope) -> Optional[LolValue]:
    label = tree_label(n)
    handler = _STMT_DISPATCH.get(label) if label is not None else None

    if handler is None:
        raise LolRuntimeError(f"Unknown statement: {label or n!r}")

    return handler(n, scope)

# ---------------- Expressions ----------------

def eval_node(n: Node, scope: Scope) -> LolValue:
    try:
        return _eval_node_inner(n, scope)
    except LolRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def _eval_node_inner(n: Node, scope: Scope) -> LolValue:
    if is_token(n):
        return _eval_token(n, scope)

    if not is_tree(n):
        raise LolRuntimeError(f"Unexpected expression node {n!r}")

    d = str(n.data)
    handler = _EXPR_DISPATCH.get(d)
    if handler is not None:
        return handler(n, scope)

    if d in ARITHMETIC_OPS:
        return eval_arithmetic(n, scope, eval_node)

    if d in COMPARE_OPS:
        return eval_compare(n, scope, eval_node)

    if d in EQUALITY_OPS:
        return eval_equality(n, scope, eval_node)

    if d in BOOLEAN_OPS:
        return eval_boolean(n, scope, eval_node)

    if d in VARIADIC_OPS:
        return eval_variadic(n, scope, eval_node)

    raise LolRuntimeError(f"Unknown expression: {d}")

def _eval_token(t: Token, scope: Scope) -> LolValue:
    handler = LITERAL_DISPATCH.get(t.type)
    if handler:
        return handler(t, scope)

    raise LolRuntimeError(f"Unhandled token {t.type}:{t.value}")

# ---------------- Dispatch ----------------

_EXPR_DISPATCH: dict[str, ExprHandler] = {
    'var_access': lambda n, scope: read_access(scope, n),
    'it': lambda _, scope: clone_value(scope.it),
    'not': lambda n, scope: eval_not(n, scope, eval_node),
    'smoosh': lambda n, scope: eval_smoosh(n, scope, eval_node),
    'maek': eval_unimplemented,
}

_STMT_DISPATCH: dict[str, StmtHandler] = {
    'hai': lambda _, __: None,
    'kthxbye': lambda _, __: None,
    'i_has_a': lambda n, scope: eval_declaration(n, scope, eval_node),
    'loop': lambda n, scope: eval_loop(n, scope, eval_node, exec_statement),
    'bukkit_set_slot': lambda n, scope: eval_bukkit_set_slot(n, scope, eval_node),
    'assignment': lambda n, scope: eval_assignment(n, scope, eval_node),
    'visible': lambda n, scope: eval_visible(n, scope, eval_node),
    'expr_stmt': lambda n, scope: eval_expr_stmt(n, scope, eval_node),
    'found_yr': lambda n, scope: eval_found_yr(n, scope, eval_node),
    'gtfo': eval_gtfo,
    'gimmeh': eval_gimmeh,
    'o_rly': lambda n, scope: eval_o_rly(n, scope, eval_node, exec_statement),
    'wtf': lambda n, scope: eval_wtf(n, scope, eval_node, exec_statement),
    'how_iz_i': eval_unimplemented,
    'i_iz': eval_unimplemented,
}

__all__ = [
    "eval_node",
    "exec_statement",
    "execute_block",
    "execute_program",
]
