import importlib.util
import inspect
import types
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

StepFn = Callable[[str, Any], Any]
AcceptFn = Callable[[Any], bool]

PLUGIN_REVERSED_HASH = "reversed_hash"
PLUGIN_CHECK = "check"
PLUGIN_ACCEPTS = "accepts"
PLUGIN_FORWARD_HASH = "forward_hash"
PLUGIN_PARSE_STATE = "parse_state"
PLUGIN_SYMBOLS = "SYMBOLS"
PLUGIN_INITIAL_STATE = "INITIAL_STATE"


class HashModuleLoadError(RuntimeError):
    pass

class HashModuleSignatureError(TypeError):
    pass


@dataclass(frozen=True)
class HashModule:
    """The callbacks and defaults a user hash module provides."""

    path: str
    reversed_hash: StepFn
    check: StepFn
    accepts: AcceptFn
    symbols: Optional[Tuple[str, ...]] = None
    initial_state: Any = None
    forward_hash: Optional[Callable[[str], Any]] = None
    parse_state: Callable[[str], Any] = int


def load_module_from_file(module_file_path: str) -> types.ModuleType:
    """Load a Python module file."""
    spec = importlib.util.spec_from_file_location("hash_module", module_file_path)
    if spec is None or spec.loader is None:
        raise HashModuleLoadError(f"Could not load spec for: {module_file_path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)  # executes user code
    return mod


def _require_positional(fn: Callable, name: str, count: int, usage: str) -> None:
    sig = inspect.signature(fn)
    params = list(sig.parameters.values())
    if len(params) != count or any(
        p.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        for p in params
    ):
        raise HashModuleSignatureError(
            f"{name} must accept exactly {count} positional arg(s): {usage}"
        )


def _get_function(mod: types.ModuleType, name: str, usage: str, count: int, required: bool = True):
    fn = getattr(mod, name, None)
    if fn is None:
        if required:
            raise HashModuleLoadError(f"Hash module must define `{name}{usage}`")
        return None
    if not callable(fn):
        raise HashModuleLoadError(f"`{name}` in hash module is not callable")
    _require_positional(fn, name, count, usage)
    return fn


def load_hash_module(module_file_path: str) -> HashModule:
    """Load the user defined hash callbacks from a Python module file."""
    mod = load_module_from_file(module_file_path)

    symbols = getattr(mod, PLUGIN_SYMBOLS, None)
    if symbols is not None:
        if isinstance(symbols, str) or not all(isinstance(s, str) for s in symbols):
            raise HashModuleLoadError(f"`{PLUGIN_SYMBOLS}` must be a sequence of strings")
        symbols = tuple(symbols)

    parse_state = _get_function(mod, PLUGIN_PARSE_STATE, "(text: str)", 1, required=False)

    return HashModule(
        path=module_file_path,
        reversed_hash=_get_function(mod, PLUGIN_REVERSED_HASH, "(symbol: str, state)", 2),
        check=_get_function(mod, PLUGIN_CHECK, "(symbol: str, state)", 2),
        accepts=_get_function(mod, PLUGIN_ACCEPTS, "(state) -> bool", 1),
        symbols=symbols,
        initial_state=getattr(mod, PLUGIN_INITIAL_STATE, None),
        forward_hash=_get_function(mod, PLUGIN_FORWARD_HASH, "(text: str)", 1, required=False),
        parse_state=parse_state or int,
    )


def parse_symbols(text: str) -> Tuple[str, ...]:
    """ Split a comma separated alphabet, e.g. "a,b,ab". """
    return tuple(s for s in (part.strip() for part in text.split(",")) if s)


def unique(items: Iterable[str]) -> List[str]:
    """ Drop repeated strings, keeping the first occurrence. """
    return list(dict.fromkeys(items))


def verify_candidates(candidates: Iterable[str], forward_hash: Callable[[str], Any], terminal_state: Any) -> Tuple[List[str], List[str]]:
    """ Split candidates into those that hash to the terminal state and those that don't. """
    valid, invalid = [], []
    for candidate in candidates:
        if forward_hash(candidate) == terminal_state:
            valid.append(candidate)
        else:
            invalid.append(candidate)
    return valid, invalid
