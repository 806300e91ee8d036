from dataclasses import dataclass, field
from typing import Generic, Iterator, List, Optional, Tuple, TypeAlias, TypeVar


S = TypeVar("S")

NodeRef: TypeAlias = Tuple[int, int]  # (depth, index within that level)


@dataclass(frozen=True, slots=True)
class Node(Generic[S]):
    """One step of a reverse walk. The root has no symbol and no parent."""

    symbol: Optional[str]
    state: S
    parent: Optional[int] = None  # index into the previous level

    @property
    def is_root(self) -> bool:
        return self.parent is None


@dataclass(slots=True)
class Trie(Generic[S]):
    """
    Append-only arena of levels. Nodes never hold references to each other,
    only the index of their parent in the level above.
    """

    levels: List[List[Node[S]]] = field(default_factory=list)
    leaves: List[NodeRef] = field(default_factory=list)

    @classmethod
    def rooted_at(cls, terminal_state: S) -> "Trie[S]":
        return cls(levels=[[Node(symbol=None, state=terminal_state)]])

    @property
    def depth(self) -> int:
        """Index of the deepest materialized level."""
        return len(self.levels) - 1

    @property
    def frontier(self) -> List[Node[S]]:
        return self.levels[-1]

    def node_count(self) -> int:
        return sum(len(level) for level in self.levels)

    def append_level(self, nodes: List[Node[S]], leaf_indexes: List[int]) -> int:
        """Add a finished level and record which of its nodes are leaves."""
        depth = len(self.levels)
        self.levels.append(nodes)
        self.leaves.extend((depth, idx) for idx in leaf_indexes)
        return depth

    def node(self, ref: NodeRef) -> Node[S]:
        depth, idx = ref
        return self.levels[depth][idx]

    def walk_to_root(self, ref: NodeRef) -> Iterator[Node[S]]:
        """Yield nodes from `ref` up to, but not including, the root."""
        depth, _ = ref
        node = self.node(ref)
        while not node.is_root:
            yield node
            depth -= 1
            node = self.node((depth, node.parent))
