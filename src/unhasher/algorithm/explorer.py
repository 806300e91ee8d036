# explorer.py
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from unhasher.logs import get_logger
from unhasher.models.node import Node, Trie
from unhasher.search_snapshot import SearchSnapshot
from unhasher.state_queue import SingleSlotQueue

S = TypeVar("S")

StepFn = Callable[[str, S], S]
AcceptFn = Callable[[S], bool]

log = get_logger(__name__)


@dataclass(slots=True)
class Expansion(Generic[S]):
    """Children produced by one frontier node, plus how many symbols were rejected."""
    children: List[Node[S]] = field(default_factory=list)
    pruned: int = 0


@dataclass(slots=True)
class LevelStats:
    depth: int = 0
    frontier_size: int = 0
    children: int = 0
    pruned: int = 0
    leaves: int = 0


def should_continue(frontier: Sequence[Node[S]], initial_state: S, depth: int, max_depth: int) -> bool:
    """
    A level is expanded only while it has nodes, none of them has already
    passed the initial state, and the depth cap is not reached.
    """
    if not frontier or depth >= max_depth:
        return False
    return all(node.state >= initial_state for node in frontier)


def expand_node(
    parent_index: int,
    node: Node[S],
    *,
    symbols: Sequence[str],
    reversed_hash_function: StepFn,
    check_function: StepFn,
    acceptance_function: AcceptFn,
    initial_state: S,
) -> Expansion[S]:
    """Try every symbol as the last one consumed before reaching `node`."""
    expansion: Expansion[S] = Expansion()
    for symbol in symbols:
        check_state = check_function(symbol, node.state)
        if not (acceptance_function(check_state) and check_state >= initial_state):
            expansion.pruned += 1
            continue

        state = reversed_hash_function(symbol, node.state)
        expansion.children.append(Node(symbol=symbol, state=state, parent=parent_index))
    return expansion


def merge_expansions(expansions, initial_state: S, stats: LevelStats):
    """Flatten per-node buffers into the next level, in frontier order."""
    next_level: List[Node[S]] = []
    leaf_indexes: List[int] = []
    for expansion in expansions:
        for child in expansion.children:
            if child.state == initial_state:
                leaf_indexes.append(len(next_level))
            next_level.append(child)
        stats.pruned += expansion.pruned

    stats.children = len(next_level)
    stats.leaves = len(leaf_indexes)
    return next_level, leaf_indexes


def explore(
    symbols: Sequence[str],
    reversed_hash_function: StepFn,
    check_function: StepFn,
    acceptance_function: AcceptFn,
    terminal_state: S,
    initial_state: S,
    max_string_length: int,
    *,
    max_workers: Optional[int] = None,
    progress: Optional[SingleSlotQueue[SearchSnapshot]] = None,
) -> Trie[S]:
    """
    Build the reverse-walk trie breadth first, starting at the terminal state.
    Every node whose state equals the initial state is recorded as a leaf.

    Callers must supply states that move monotonically towards the initial
    state along any valid reverse walk, otherwise the pruning below drops
    live branches. Exceptions raised by the callbacks are not caught.
    """
    trie: Trie[S] = Trie.rooted_at(terminal_state)
    expand = partial(
        expand_node,
        symbols=symbols,
        reversed_hash_function=reversed_hash_function,
        check_function=check_function,
        acceptance_function=acceptance_function,
        initial_state=initial_state,
    )
    state_version = 0
    pruned_total = 0

    def publish(complete: bool) -> None:
        nonlocal state_version
        if progress is None:
            return
        state_version += 1
        progress.publish(SearchSnapshot(
            state_version=state_version,
            complete=complete,
            depth=trie.depth,
            max_depth=max_string_length,
            alphabet_size=len(symbols),
            frontier_size=len(trie.frontier),
            nodes_created=trie.node_count(),
            pruned=pruned_total,
            leaves_found=len(trie.leaves),
        ))

    try:
        publish(complete=False)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            while should_continue(trie.frontier, initial_state, trie.depth, max_string_length):
                frontier = trie.frontier
                stats = LevelStats(depth=trie.depth + 1, frontier_size=len(frontier))

                # Each node gets its own buffer; merged once the whole level is done.
                expansions = executor.map(expand, range(len(frontier)), frontier)
                next_level, leaf_indexes = merge_expansions(expansions, initial_state, stats)
                trie.append_level(next_level, leaf_indexes)

                pruned_total += stats.pruned
                log.debug(
                    "level expanded",
                    depth=stats.depth,
                    frontier_size=stats.frontier_size,
                    children=stats.children,
                    pruned=stats.pruned,
                    leaves=stats.leaves,
                )
                publish(complete=False)

        publish(complete=True)
    finally:
        # Always close the queue so a UI loop can exit.
        if progress is not None:
            progress.close()

    return trie
