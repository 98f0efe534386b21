from __future__ import annotations

from ..runtime import LolBukkit, LolNoob, LolNumbar, LolNumbr, LolTroof, LolValue, LolYarn

def is_truthy(val: LolValue) -> bool:
    match val:
        case LolTroof(value=b):
            return b
        case LolNoob():
            return False
        case LolNumbr(value=num) | LolNumbar(value=num):
            return num != 0
        case LolYarn(value=s):
            return s != ""
        case LolBukkit():
            return True

def logical_not(val: LolValue) -> bool:
    return not is_truthy(val)
