"""Unit tests for the JSON s-expression front-end (no I/O operations)."""

import pytest

from let_override_checker.errors import SyntaxLoadError
from let_override_checker.frontends.sexp import load_sexp, parse_sexp_from_source
from let_override_checker.models import (
    Block,
    Call,
    LocalVariableReference,
    Other,
    Sequence,
    StringLiteral,
    SymbolLiteral,
)


def test_let_block() -> None:
    """Test converting let(:foo) { 1 }."""
    tree = load_sexp(["block", ["send", None, "let", ["sym", "foo"]], ["args"], ["int", 1]])

    assert isinstance(tree, Block)
    assert tree.call.method == "let"
    assert tree.call.receiver is None
    assert len(tree.call.arguments) == 1
    assert isinstance(tree.call.arguments[0], SymbolLiteral)
    assert tree.call.arguments[0].value == "foo"
    assert isinstance(tree.body, Other)
    assert tree.body.kind == "int"


def test_rspec_describe_receiver() -> None:
    """Test that RSpec.describe keeps its constant receiver."""
    tree = load_sexp(["block", ["send", ["const", None, "RSpec"], "describe"], ["args"], None])

    assert isinstance(tree, Block)
    assert tree.body is None
    receiver = tree.call.receiver
    assert isinstance(receiver, Other)
    assert receiver.kind == "const"
    assert receiver.text == "RSpec"


def test_top_level_constant_receiver() -> None:
    """Test ::RSpec keeps the constant name with a cbase child."""
    receiver = load_sexp(["const", ["cbase"], "RSpec"])
    assert isinstance(receiver, Other)
    assert receiver.text == "RSpec"
    assert [c.kind for c in receiver.children if isinstance(c, Other)] == ["cbase"]


def test_begin_becomes_sequence() -> None:
    """Test that begin bodies turn into sequences of their statements."""
    tree = load_sexp(["begin", ["lvasgn", "name", ["sym", "foo"]], ["lvar", "name"], ["str", "x"]])

    assert isinstance(tree, Sequence)
    assignment, reference, string = tree.statements
    assert isinstance(assignment, Other)
    assert assignment.kind == "lvasgn"
    assert isinstance(assignment.children[0], SymbolLiteral)
    assert isinstance(reference, LocalVariableReference)
    assert reference.name == "name"
    assert isinstance(string, StringLiteral)
    assert string.value == "x"


def test_numblock_is_a_block() -> None:
    """Test let(:foo) { _1 } style numbered-parameter blocks."""
    tree = load_sexp(["numblock", ["send", None, "let", ["sym", "foo"]], 1, ["lvar", "_1"]])
    assert isinstance(tree, Block)
    assert tree.call.method == "let"


def test_lambda_block_is_other() -> None:
    """Test that blocks not attached to a method call are kept opaque."""
    tree = load_sexp(["block", ["lambda"], ["args"], ["int", 1]])
    assert isinstance(tree, Other)
    assert tree.kind == "block"


def test_safe_navigation_call() -> None:
    """Test that csend is a call like send."""
    tree = load_sexp(["csend", ["lvar", "x"], "name"])
    assert isinstance(tree, Call)
    assert isinstance(tree.receiver, LocalVariableReference)


def test_null_is_empty_file() -> None:
    """Test that a null dump is an empty program."""
    tree = load_sexp(None)
    assert isinstance(tree, Sequence)
    assert tree.statements == ()


def test_invalid_json() -> None:
    """Test that broken JSON is a load error."""
    with pytest.raises(SyntaxLoadError, match="Invalid JSON"):
        parse_sexp_from_source("[\"block\", ")


def test_not_an_sexp() -> None:
    """Test that JSON which is not a node array is rejected."""
    with pytest.raises(SyntaxLoadError, match="Expected an s-expression"):
        parse_sexp_from_source('{"type": "block"}')


def test_truncated_node() -> None:
    """Test that a node missing required children is rejected."""
    with pytest.raises(SyntaxLoadError, match="Malformed"):
        parse_sexp_from_source('["block", ["send", null, "let"]]')


def test_deeply_nested_dump() -> None:
    """Test that nesting far beyond the interpreter's recursion limit still converts."""
    depth = 5000
    dump: list[object] = ["send", None, "let", ["sym", "foo"]]
    for _ in range(depth):
        dump = ["begin", dump]

    node = load_sexp(dump)

    for _ in range(depth):
        assert isinstance(node, Sequence)
        (node,) = node.statements
    assert isinstance(node, Call)
    assert node.method == "let"


def test_json_nested_too_deeply() -> None:
    """Test that JSON the decoder cannot nest that deep is a load error, not a crash."""
    depth = 100_000
    with pytest.raises(SyntaxLoadError, match="Invalid JSON"):
        parse_sexp_from_source("[" * depth + "]" * depth)
