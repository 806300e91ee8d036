from typing import Optional, Sequence

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from unhasher.search_snapshot import SearchSnapshot
from unhasher.state_queue import SingleSlotQueue


COLORS = {
    "running": "yellow",
    "complete": "spring_green2",
    "leaves": "bold green",
    "pruned": "dark_red",
}


def render(state: Optional[SearchSnapshot]):
    """Render the explorer progress snapshot."""
    if state is None:
        return Panel("Waiting for first update…", title="Reverse Hash", border_style="dim")

    status = "complete" if state.complete else "running"
    ui_table = Table(
        title=f"Depth {state.depth} / {state.max_depth}  |  {state.completion_percent:.0f}%  |  v{state.state_version}"
    )
    ui_table.add_column("Status")
    ui_table.add_column("Alphabet", justify="right")
    ui_table.add_column("Frontier", justify="right")
    ui_table.add_column("Nodes", justify="right")
    ui_table.add_column("Pruned", justify="right")
    ui_table.add_column("Solutions", justify="right")
    ui_table.add_row(
        f"[{COLORS[status]}]{status}[/{COLORS[status]}]",
        str(state.alphabet_size),
        str(state.frontier_size),
        str(state.nodes_created),
        f"[{COLORS['pruned']}]{state.pruned}[/{COLORS['pruned']}]",
        f"[{COLORS['leaves']}]{state.leaves_found}[/{COLORS['leaves']}]",
    )
    return ui_table


def render_solutions(terminal_state, solutions: Sequence[str]) -> Table:
    table = Table(title=f"Possible inputs for {terminal_state!r}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Input", style="green")
    table.add_column("Length", justify="right")
    for idx, solution in enumerate(solutions, start=1):
        table.add_row(str(idx), solution, str(len(solution)))
    return table


def ui_loop(state_queue: SingleSlotQueue[SearchSnapshot], console: Optional[Console] = None) -> None:
    """Loop the UI until the explorer closes the queue."""
    with Live(render(None), refresh_per_second=30, screen=False, console=console) as live:
        while True:
            state = state_queue.get()
            if state is None:
                break
            live.update(render(state))
    # Off a TTY, Live leaves the cursor at the end of the last frame.
    if not live.console.is_terminal:
        live.console.line()
