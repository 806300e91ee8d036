from collections.abc import Sequence
from typing import Any, Callable, List, Optional, TypeVar

from unhasher.algorithm.explorer import explore
from unhasher.logs import get_logger
from unhasher.models.node import NodeRef, Trie
from unhasher.search_snapshot import SearchSnapshot
from unhasher.state_queue import SingleSlotQueue

S = TypeVar("S")

DEFAULT_MAX_STRING_LENGTH = 8

log = get_logger(__name__)


class InvalidArgumentError(ValueError):
    pass


def is_default_value(value: Any) -> bool:
    """True for None and for the zero value of the value's type (0, "", () ...)."""
    if value is None:
        return True
    try:
        default = type(value)()
    except TypeError:
        # No argument-free constructor, so there is no zero value to collide with.
        return False
    return value == default


def validate_arguments(
    symbols: Optional[Sequence[str]],
    reversed_hash_function: Optional[Callable],
    check_function: Optional[Callable],
    acceptance_function: Optional[Callable],
    terminal_state: Any,
    max_string_length: int,
) -> None:
    """Reject unusable input before any callback runs."""
    if symbols is None:
        raise InvalidArgumentError("Symbol alphabet cannot be None")
    if not isinstance(symbols, Sequence):
        raise InvalidArgumentError(f"Symbol alphabet must be a sequence, got {type(symbols).__name__}")
    if len(symbols) == 0:
        raise InvalidArgumentError("Symbol alphabet cannot be empty")
    for symbol in symbols:
        if not isinstance(symbol, str):
            raise InvalidArgumentError(f"Symbols must be strings, got {symbol!r}")

    callbacks = {
        "reversed_hash_function": reversed_hash_function,
        "check_function": check_function,
        "acceptance_function": acceptance_function,
    }
    for name, fn in callbacks.items():
        if fn is None or not callable(fn):
            raise InvalidArgumentError(f"Hashing function `{name}` must be callable, got {fn!r}")

    if is_default_value(terminal_state):
        raise InvalidArgumentError(f"Terminal state cannot be the default value ({terminal_state!r})")

    if isinstance(max_string_length, bool) or not isinstance(max_string_length, int):
        raise InvalidArgumentError(f"Max string length must be an int, got {type(max_string_length).__name__}")
    if max_string_length == 0:
        raise InvalidArgumentError("Max string length cannot be zero")
    if max_string_length < 0:
        raise InvalidArgumentError(f"Max string length cannot be negative ({max_string_length})")


def build_solution_string(trie: Trie[S], leaf: NodeRef) -> str:
    """
    Spell the input that leads to `leaf`. The reverse walk peels symbols off
    the end of the input, so the leaf holds the first symbol and the child of
    the root holds the last one. Joining leaf to root is therefore the forward
    order; joining root to leaf would spell every non-palindrome backwards.
    """
    return "".join(node.symbol for node in trie.walk_to_root(leaf))


def get_solution_strings(trie: Trie[S]) -> List[str]:
    return [build_solution_string(trie, leaf) for leaf in trie.leaves]


def reverse_hash(
    symbols: Sequence[str],
    reversed_hash_function: Callable[[str, S], S],
    check_function: Callable[[str, S], S],
    acceptance_function: Callable[[S], bool],
    terminal_state: S,
    initial_state: S,
    max_string_length: int,
    *,
    max_workers: Optional[int] = None,
    progress: Optional[SingleSlotQueue[SearchSnapshot]] = None,
) -> List[str]:
    """
    Reverse an iteratively generated hash function.

    - symbols: the alphabet the input strings are built from
    - reversed_hash_function: (symbol, state) -> the state before `symbol` was hashed
    - check_function: (symbol, state) -> intermediate state used only to validate the step
    - acceptance_function: decides whether a check state is a legal step
    - terminal_state: the hash being reversed
    - initial_state: the seed of the hash; reaching it completes a candidate
    - max_string_length: maximum number of symbols per candidate

    Returns every candidate, one per accepting path. Duplicates are kept and
    the order is not meaningful.
    """
    try:
        validate_arguments(
            symbols,
            reversed_hash_function,
            check_function,
            acceptance_function,
            terminal_state,
            max_string_length,
        )
    except InvalidArgumentError:
        # Nothing will be published, let a waiting UI exit.
        if progress is not None:
            progress.close()
        raise
    alphabet = tuple(symbols)

    log.info(
        "search started",
        alphabet_size=len(alphabet),
        terminal_state=terminal_state,
        initial_state=initial_state,
        max_string_length=max_string_length,
    )
    trie = explore(
        alphabet,
        reversed_hash_function,
        check_function,
        acceptance_function,
        terminal_state,
        initial_state,
        max_string_length,
        max_workers=max_workers,
        progress=progress,
    )
    solutions = get_solution_strings(trie)
    log.info(
        "search finished",
        levels=len(trie.levels),
        nodes=trie.node_count(),
        solutions=len(solutions),
    )
    return solutions
