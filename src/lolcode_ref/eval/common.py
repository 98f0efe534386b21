from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from ..runtime import (
    LolBukkit,
    LolNoob,
    LolNumbar,
    LolNumbr,
    LolRuntimeError,
    LolTroof,
    LolYarn,
    round_f32,
)
from ..tree import is_token, token_kind

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise LolRuntimeError(f"{context} must be an identifier")

def format_numbar(value: float) -> str:
    """Shortest positional decimal that reads back as the same binary32."""
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    text = repr(value)

    for precision in range(1, 10):
        candidate = f"{value:.{precision}g}"
        if round_f32(float(candidate)) == value:
            text = candidate
            break

    return format(Decimal(text), "f")

def stringify(value: Any) -> str:
    if isinstance(value, LolYarn):
        return value.value

    if isinstance(value, LolNumbr):
        return str(value.value)

    if isinstance(value, LolNumbar):
        return format_numbar(value.value)

    if isinstance(value, LolTroof):
        return "true" if value.value else "false"

    if isinstance(value, LolNoob):
        return "NOOB"

    if isinstance(value, LolBukkit):
        return "".join(stringify(v) for v in value.slots.values())

    return str(value)
