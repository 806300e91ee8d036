"""
Toy hash used by the demo command: h = (h * 3 + value(c)) * 5 for each
character, starting from 0. h("aaa") == 1205.

The module follows the hash module layout, so it can also be passed to
`unhasher solve --hash-module`.
"""
from functools import reduce

SYMBOLS = ("a", "b")
INITIAL_STATE = 0

SYMBOL_VALUES = {"a": 1, "b": 2}
MULTIPLIER = 3
SCALE = 5


def forward_hash(text: str) -> int:
    return reduce(lambda acc, c: (acc * MULTIPLIER + SYMBOL_VALUES[c]) * SCALE, text, INITIAL_STATE)


def check(symbol: str, state: int) -> int:
    """ Undo the scaling and the symbol's contribution, leaving 3 * previous state times 5. """
    return state - SYMBOL_VALUES[symbol] * SCALE


def accepts(check_state: int) -> bool:
    """ Only states that are an exact multiple of 3 * 5 have a predecessor. """
    return check_state % (MULTIPLIER * SCALE) == 0


def reversed_hash(symbol: str, state: int) -> int:
    return check(symbol, state) // (MULTIPLIER * SCALE)
