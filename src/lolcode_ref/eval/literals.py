from __future__ import annotations

from typing import Any, Callable, Dict

from lark import Token

from ..runtime import LolNoob, LolNumbar, LolNumbr, LolRuntimeError, LolTroof, LolValue, LolYarn

def token_numbr(token: Token, _: Any) -> LolNumbr:
    return LolNumbr(int(token.value))

def token_numbar(token: Token, _: Any) -> LolNumbar:
    return LolNumbar(float(token.value))

def token_yarn(token: Token, _: Any) -> LolYarn:
    return LolYarn(str(token.value))

def token_troof(token: Token, _: Any) -> LolTroof:
    match token.value:
        case "WIN":
            return LolTroof(True)
        case "FAIL":
            return LolTroof(False)

    raise LolRuntimeError(f"Unknown TROOF literal {token.value!r}")

def token_noob(_token: Token, _: Any) -> LolNoob:
    return LolNoob()

LITERAL_DISPATCH: Dict[str, Callable[[Token, Any], LolValue]] = {
    'NUMBR': token_numbr,
    'NUMBAR': token_numbar,
    'YARN': token_yarn,
    'TROOF': token_troof,
    'NOOB': token_noob,
}
