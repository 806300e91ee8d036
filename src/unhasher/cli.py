from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence

import click
from rich.console import Console

from unhasher import demo_hash
from unhasher.logs import LOG_LEVELS, configure_logging, get_logger
from unhasher.reverser import DEFAULT_MAX_STRING_LENGTH, InvalidArgumentError, reverse_hash
from unhasher.search_snapshot import SearchSnapshot
from unhasher.state_queue import SingleSlotQueue
from unhasher.ui import render_solutions, ui_loop
from unhasher.utils import (
    load_hash_module,
    parse_symbols,
    unique,
    verify_candidates,
    HashModule,
    HashModuleLoadError,
    HashModuleSignatureError,
)

log = get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default="warning",
    show_default=True,
    help="Minimum level of log events written to stderr.",
)
@click.option("--json-logs", is_flag=True, help="Render log events as JSON.")
def cli(log_level: str, json_logs: bool):
    configure_logging(log_level, json_logs)


def solver(
    hash_module: HashModule,
    symbols: Sequence[str],
    terminal_state: Any,
    initial_state: Any,
    max_length: int,
    *,
    workers: Optional[int] = None,
    show_progress: bool = False,
) -> List[str]:
    """Run the reverser, optionally with a live progress table on stderr."""
    args = (
        symbols,
        hash_module.reversed_hash,
        hash_module.check,
        hash_module.accepts,
        terminal_state,
        initial_state,
        max_length,
    )
    try:
        if not show_progress:
            return reverse_hash(*args, max_workers=workers)

        state_queue: SingleSlotQueue[SearchSnapshot] = SingleSlotQueue()
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(reverse_hash, *args, max_workers=workers, progress=state_queue)

            try:
                ui_loop(state_queue, console=Console(stderr=True))
            except KeyboardInterrupt:
                state_queue.close()

            return future.result()
    except InvalidArgumentError as e:
        raise click.ClickException(str(e))


def load_hash_module_or_fail(path: str) -> HashModule:
    try:
        return load_hash_module(path)
    except (HashModuleLoadError, HashModuleSignatureError) as e:
        raise click.ClickException(f"Invalid hash module {path}: {e}")


def parse_state_option(hash_module: HashModule, value: str, param_hint: str) -> Any:
    try:
        return hash_module.parse_state(value)
    except ValueError as e:
        raise click.BadParameter(f"Cannot parse state {value!r}: {e}", param_hint=param_hint)


def print_solutions(terminal_state: Any, solutions: Sequence[str], output_format: str) -> None:
    if output_format == "table":
        Console().print(render_solutions(terminal_state, solutions))
        return
    for solution in solutions:
        click.echo(solution)


@cli.command()
@click.option("--input", "-i", "text", default="aaa", show_default=True, help="String to hash and then recover.")
@click.option(
    "--max-length",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Longest candidate to search for. Defaults to the input length.",
)
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Threads used per level.")
def demo(text: str, max_length: Optional[int], workers: Optional[int]):
    """Reverse the bundled toy hash: h = (h * 3 + {a: 1, b: 2}) * 5."""
    unknown = sorted(set(text) - set(demo_hash.SYMBOLS))
    if unknown:
        raise click.BadParameter(
            f"Unsupported characters {unknown}, the demo alphabet is {list(demo_hash.SYMBOLS)}",
            param_hint="--input",
        )

    terminal_state = demo_hash.forward_hash(text)
    click.echo(f"Hash of {text} = {terminal_state}")

    try:
        solutions = reverse_hash(
            demo_hash.SYMBOLS,
            demo_hash.reversed_hash,
            demo_hash.check,
            demo_hash.accepts,
            terminal_state,
            demo_hash.INITIAL_STATE,
            max_length or len(text),
            max_workers=workers,
        )
    except InvalidArgumentError as e:
        raise click.ClickException(str(e))

    click.echo(f"The possible input strings for the hash {terminal_state} are:")
    for solution in solutions:
        click.echo(solution)


@cli.command()
@click.option("--hash-module", "-m", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--terminal", "-t", required=True, help="The hash value to reverse.")
@click.option("--initial", "-i", default=None, help="Seed of the hash. Defaults to the module's INITIAL_STATE.")
@click.option(
    "--max-length",
    "-n",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_STRING_LENGTH,
    show_default=True,
)
@click.option("--symbols", "-s", default=None, help="Comma separated alphabet. Defaults to the module's SYMBOLS.")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Threads used per level.")
@click.option("--unique", "only_unique", is_flag=True, help="Print each distinct candidate once.")
@click.option("--verify", is_flag=True, help="Drop candidates whose forward hash differs from the terminal state.")
@click.option("--progress/--no-progress", default=False, help="Show a live progress table on stderr.")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["lines", "table"]),
    default="lines",
    show_default=True,
)
def solve(
    hash_module: str,
    terminal: str,
    initial: Optional[str],
    max_length: int,
    symbols: Optional[str],
    workers: Optional[int],
    only_unique: bool,
    verify: bool,
    progress: bool,
    output_format: str,
):
    """Find every input of up to --max-length symbols that hashes to --terminal."""
    module = load_hash_module_or_fail(hash_module)

    terminal_state = parse_state_option(module, terminal, "--terminal")
    if initial is not None:
        initial_state = parse_state_option(module, initial, "--initial")
    elif module.initial_state is not None:
        initial_state = module.initial_state
    else:
        raise click.UsageError("No --initial given and the hash module defines no INITIAL_STATE")

    alphabet = parse_symbols(symbols) if symbols is not None else module.symbols
    if not alphabet:
        raise click.UsageError("No --symbols given and the hash module defines no SYMBOLS")

    if verify and module.forward_hash is None:
        raise click.UsageError("--verify needs a forward_hash(text) function in the hash module")

    solutions = solver(
        module,
        alphabet,
        terminal_state,
        initial_state,
        max_length,
        workers=workers,
        show_progress=progress,
    )

    if verify:
        solutions, rejected = verify_candidates(solutions, module.forward_hash, terminal_state)
        for candidate in rejected:
            log.warning("candidate failed verification", candidate=candidate)
            click.echo(f"Rejected {candidate!r}: forward hash does not match", err=True)

    if only_unique:
        solutions = unique(solutions)

    print_solutions(terminal_state, solutions, output_format)


@cli.command("hash")
@click.option("--hash-module", "-m", required=True, type=click.Path(exists=True, dir_okay=False))
@click.argument("text")
def hash_text(hash_module: str, text: str):
    """Print the forward hash of TEXT using the module's forward_hash."""
    module = load_hash_module_or_fail(hash_module)
    if module.forward_hash is None:
        raise click.UsageError("The hash module defines no forward_hash(text) function")
    click.echo(module.forward_hash(text))


if __name__ == "__main__":
    cli()
