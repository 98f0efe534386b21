from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, Dict

from .types import (
    LolNoob, LolYarn, LolNumbr, LolNumbar, LolTroof, LolBukkit,
    LolValue, Scope,
    LolRuntimeError, IdentifierNotFound, InvalidType, CannotSRSNonYarn,
    GenericError, InputReadError,
    is_lol_value, round_f32, wrap_i32,
)

# Default value produced by `ITZ A <type>` for each type tag.
_TYPE_DEFAULTS: Dict[str, Callable[[], LolValue]] = {
    "YARN": lambda: LolYarn(""),
    "NUMBR": lambda: LolNumbr(0),
    "NUMBAR": lambda: LolNumbar(0.0),
    "TROOF": lambda: LolTroof(False),
    "NOOB": LolNoob,
    "BUKKIT": LolBukkit,
}

def default_value(type_tag: str) -> LolValue:
    factory = _TYPE_DEFAULTS.get(str(type_tag))
    if factory is None:
        raise InvalidType(f"Unknown type '{type_tag}'")

    return factory()

def box(value: object) -> LolValue:
    """Wrap a host value as the matching LOLCODE value."""
    if is_lol_value(value):
        return value

    match value:
        case None:
            return LolNoob()
        case bool():
            return LolTroof(value)
        case int():
            return LolNumbr(value)
        case float():
            return LolNumbar(value)
        case str():
            return LolYarn(value)
        case Mapping():
            return LolBukkit({str(k): box(v) for k, v in value.items()})

    raise InvalidType(f"Cannot convert {type(value).__name__} to a LOLCODE value")

def clone_value(value: LolValue) -> LolValue:
    """Copy a value so later slot writes through the original stay invisible."""
    if isinstance(value, LolBukkit):
        return LolBukkit({k: clone_value(v) for k, v in value.slots.items()})

    return value

def type_name(value: LolValue) -> str:
    match value:
        case LolNoob():
            return "NOOB"
        case LolYarn():
            return "YARN"
        case LolNumbr():
            return "NUMBR"
        case LolNumbar():
            return "NUMBAR"
        case LolTroof():
            return "TROOF"
        case LolBukkit():
            return "BUKKIT"

    return type(value).__name__

__all__ = [
    "CannotSRSNonYarn",
    "GenericError",
    "IdentifierNotFound",
    "InputReadError",
    "InvalidType",
    "LolBukkit",
    "LolNoob",
    "LolNumbar",
    "LolNumbr",
    "LolRuntimeError",
    "LolTroof",
    "LolValue",
    "LolYarn",
    "Scope",
    "box",
    "clone_value",
    "default_value",
    "is_lol_value",
    "round_f32",
    "type_name",
    "wrap_i32",
]
