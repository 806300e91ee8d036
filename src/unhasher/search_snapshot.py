from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SearchSnapshot:
    """Minimal immutable snapshot of explorer progress."""

    state_version: int
    complete: bool
    depth: int
    max_depth: int
    alphabet_size: int
    frontier_size: int
    nodes_created: int
    pruned: int
    leaves_found: int

    @property
    def completion_percent(self) -> float:
        if self.complete:
            return 100.0
        return self.depth / self.max_depth * 100
