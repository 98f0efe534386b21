from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from typing_extensions import TypeAlias, TypeGuard

# ---------- Value Model ----------

_I32_MOD = 1 << 32
_I32_MAX = (1 << 31) - 1

def wrap_i32(value: int) -> int:
    """Two's complement wrap into the signed 32-bit range."""
    value &= _I32_MOD - 1

    if value > _I32_MAX:
        value -= _I32_MOD

    return value

def round_f32(value: float) -> float:
    """Round a host float to the nearest binary32 value."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return float("inf") if value > 0 else float("-inf")

@dataclass
class LolNoob:
    def __repr__(self) -> str:
        return "NOOB"

@dataclass
class LolYarn:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class LolNumbr:
    value: int

    def __post_init__(self) -> None:
        self.value = wrap_i32(int(self.value))

    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class LolNumbar:
    value: float

    def __post_init__(self) -> None:
        self.value = round_f32(float(self.value))

    def __repr__(self) -> str:
        return f"{self.value!r}f"

@dataclass
class LolTroof:
    value: bool
    def __repr__(self) -> str:
        return "WIN" if self.value else "FAIL"

@dataclass
class LolBukkit:
    slots: Dict[str, 'LolValue'] = field(default_factory=dict)
    def __repr__(self) -> str:
        pairs = []

        for k, v in self.slots.items():
            pairs.append(f"{k}: {v!r}")

        return "BUKKIT{" + ", ".join(pairs) + "}"

LolValue: TypeAlias = LolNoob | LolYarn | LolNumbr | LolNumbar | LolTroof | LolBukkit

_LOL_VALUE_TYPES: Tuple[type, ...] = (
    LolNoob,
    LolYarn,
    LolNumbr,
    LolNumbar,
    LolTroof,
    LolBukkit,
)

def is_lol_value(value: object) -> TypeGuard[LolValue]:
    return isinstance(value, _LOL_VALUE_TYPES)

# ---------- Scope Chain ----------

class Scope:
    """One lexical environment: own bindings, a parent link and the IT register."""

    def __init__(self, parent: Optional['Scope']=None):
        self.parent = parent
        self.vars: Dict[str, LolValue] = {}
        self.it: LolValue = LolNoob()

    def child(self) -> 'Scope':
        return Scope(parent=self)

    def declare(self, name: str, val: LolValue) -> None:
        self.vars[name] = val

    def find(self, name: str) -> Optional['Scope']:
        cur: Optional[Scope] = self

        while cur is not None:
            if name in cur.vars:
                return cur

            cur = cur.parent

        return None

    def get(self, name: str) -> LolValue:
        owner = self.find(name)
        if owner is None:
            raise IdentifierNotFound(name)

        return owner.vars[name]

    def set(self, name: str, val: LolValue) -> None:
        owner = self.find(name)
        if owner is None:
            raise IdentifierNotFound(name)

        owner.vars[name] = val

# ---------- Exceptions ----------

class LolRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.line = None
        self.column = None

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class IdentifierNotFound(LolRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Identifier '{name}' not found")
        self.name = name

class InvalidType(LolRuntimeError):
    pass

class CannotSRSNonYarn(LolRuntimeError):
    def __init__(self, name: str, value: LolValue):
        super().__init__(f"Cannot SRS '{name}': holds {type(value).__name__}, not a YARN")
        self.name = name
        self.value = value

class GenericError(LolRuntimeError):
    pass

class InputReadError(LolRuntimeError):
    """Reading a line from standard input failed; fatal for the run."""
