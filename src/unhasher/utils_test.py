import textwrap

import pytest

from unhasher import demo_hash
from unhasher.utils import (
    load_hash_module,
    parse_symbols,
    unique,
    verify_candidates,
    HashModuleLoadError,
    HashModuleSignatureError,
)


def write_module(tmp_path, source: str) -> str:
    path = tmp_path / "my_hash.py"
    path.write_text(textwrap.dedent(source))
    return str(path)


MINIMAL_MODULE = """
    def reversed_hash(symbol, state):
        return state - 1

    def check(symbol, state):
        return state - 1

    def accepts(state):
        return True
"""


class TestLoadHashModule:
    """Test suite for load_hash_module"""

    def test_demo_hash_module(self):
        """Test the bundled demo hash is a valid hash module"""
        module = load_hash_module(demo_hash.__file__)
        assert module.symbols == ("a", "b")
        assert module.initial_state == 0
        assert module.forward_hash("aaa") == 1205
        assert module.reversed_hash("a", 1205) == 80
        assert module.parse_state is int

    def test_minimal_module_defaults(self, tmp_path):
        module = load_hash_module(write_module(tmp_path, MINIMAL_MODULE))
        assert module.symbols is None
        assert module.initial_state is None
        assert module.forward_hash is None
        assert module.parse_state("12") == 12

    def test_custom_parse_state(self, tmp_path):
        source = MINIMAL_MODULE + """
    def parse_state(text):
        return int(text, 16)
"""
        module = load_hash_module(write_module(tmp_path, source))
        assert module.parse_state("ff") == 255

    @pytest.mark.parametrize("missing", ["reversed_hash", "check", "accepts"])
    def test_missing_function(self, tmp_path, missing):
        source = MINIMAL_MODULE.replace(f"def {missing}(", f"def _unused_{missing}(")
        with pytest.raises(HashModuleLoadError, match=missing):
            load_hash_module(write_module(tmp_path, source))

    def test_wrong_arity(self, tmp_path):
        source = MINIMAL_MODULE.replace("def accepts(state)", "def accepts(state, extra)")
        with pytest.raises(HashModuleSignatureError, match="accepts"):
            load_hash_module(write_module(tmp_path, source))

    def test_keyword_only_parameters_rejected(self, tmp_path):
        source = MINIMAL_MODULE.replace("def check(symbol, state)", "def check(symbol, *, state)")
        with pytest.raises(HashModuleSignatureError, match="check"):
            load_hash_module(write_module(tmp_path, source))

    def test_not_callable(self, tmp_path):
        source = MINIMAL_MODULE.replace("def accepts(state):\n        return True", "accepts = True")
        with pytest.raises(HashModuleLoadError, match="not callable"):
            load_hash_module(write_module(tmp_path, source))

    @pytest.mark.parametrize("symbols", ['"ab"', "[1, 2]"])
    def test_invalid_symbols(self, tmp_path, symbols):
        source = MINIMAL_MODULE + f"\n    SYMBOLS = {symbols}\n"
        with pytest.raises(HashModuleLoadError, match="SYMBOLS"):
            load_hash_module(write_module(tmp_path, source))

    def test_symbols_become_tuple(self, tmp_path):
        source = MINIMAL_MODULE + "\n    SYMBOLS = ['x', 'yy']\n"
        module = load_hash_module(write_module(tmp_path, source))
        assert module.symbols == ("x", "yy")


class TestHelpers:
    """Test suite for the small helpers"""

    @pytest.mark.parametrize("text,expected", [
        ("a,b", ("a", "b")),
        (" a , bb ,", ("a", "bb")),
        ("abc", ("abc",)),
        ("", ()),
    ])
    def test_parse_symbols(self, text, expected):
        assert parse_symbols(text) == expected

    def test_unique_keeps_first_occurrence(self):
        assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_verify_candidates(self):
        valid, invalid = verify_candidates(["aaa", "a", "b"], demo_hash.forward_hash, 1205)
        assert valid == ["aaa"]
        assert invalid == ["a", "b"]
