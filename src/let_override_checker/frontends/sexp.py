"""Build syntax trees from JSON s-expressions.

The Ruby ``parser`` gem prints its AST as nested JSON arrays with
``ruby-parse --emit-json``: ``[type, child, ...]``, where children are either
nested arrays (nodes) or plain values (method names, literal values, ``null``).
For example ``let(:foo) { 1 }`` becomes::

    ["block", ["send", null, "let", ["sym", "foo"]], ["args"], ["int", 1]]

These dumps carry no source positions, so nodes built here have no location.
"""

import json
import logging
from pathlib import Path
from typing import TypeGuard

from let_override_checker.errors import SyntaxLoadError
from let_override_checker.frontends.tree_building import Plan, build_bottom_up
from let_override_checker.models import (
    Block,
    Call,
    LocalVariableReference,
    Other,
    Sequence,
    StringLiteral,
    SymbolLiteral,
    SyntaxNode,
)

logger = logging.getLogger(__name__)

SEND_TYPES = frozenset({"send", "csend"})
BLOCK_TYPES = frozenset({"block", "numblock", "itblock"})
SEQUENCE_TYPES = frozenset({"begin", "kwbegin"})

type Sexp = list[object]


def _is_node(value: object) -> TypeGuard[Sexp]:
    return isinstance(value, list) and bool(value) and isinstance(value[0], str)


def _nodes(values: list[object]) -> list[Sexp]:
    return [value for value in values if _is_node(value)]


def _leaf(node: SyntaxNode) -> Plan[Sexp]:
    return [], lambda _parts: node


def _plan_send(rest: list[object]) -> Plan[Sexp]:
    receiver, method, *arguments = rest
    nodes = _nodes(arguments)
    if not _is_node(receiver):
        return nodes, lambda parts: Call(method=str(method), arguments=tuple(parts))
    return [receiver, *nodes], lambda parts: Call(method=str(method), arguments=tuple(parts[1:]), receiver=parts[0])


def _plan_block(kind: str, rest: list[object]) -> Plan[Sexp]:
    call, _params, body = rest
    if not _is_node(call):
        msg = f"{kind} without a call"
        raise ValueError(msg)

    def assemble(parts: list[SyntaxNode]) -> SyntaxNode:
        converted_call, *converted_body = parts
        if not isinstance(converted_call, Call):
            # lambda literals: ["block", ["lambda"], ...]
            return Other(kind=kind, children=tuple(parts))
        return Block(call=converted_call, body=converted_body[0] if converted_body else None)

    return [call, *_nodes([body])], assemble


def _plan(sexp: Sexp) -> Plan[Sexp]:  # noqa: PLR0911
    kind = str(sexp[0])
    rest = sexp[1:]

    if kind in SEND_TYPES:
        return _plan_send(rest)

    if kind in BLOCK_TYPES:
        return _plan_block(kind, rest)

    if kind in SEQUENCE_TYPES:
        return _nodes(rest), lambda parts: Sequence(statements=tuple(parts))

    if kind == "sym":
        return _leaf(SymbolLiteral(value=str(rest[0])))

    if kind == "str":
        return _leaf(StringLiteral(value=str(rest[0])))

    if kind == "lvar":
        return _leaf(LocalVariableReference(name=str(rest[0])))

    if kind == "const":
        scope, name = rest
        return _nodes([scope]), lambda parts: Other(kind=kind, children=tuple(parts), text=str(name))

    return _nodes(rest), lambda parts: Other(kind=kind, children=tuple(parts))


def load_sexp(data: object) -> SyntaxNode:
    """Convert a decoded s-expression into a syntax tree.

    Args:
        data: Decoded JSON; ``None`` stands for an empty file

    Returns:
        Root node of the syntax tree

    Raises:
        SyntaxLoadError: If the data is not a well-formed s-expression
    """
    if data is None:
        return Sequence()
    if not _is_node(data):
        msg = f"Expected an s-expression array, got {type(data).__name__}"
        raise SyntaxLoadError(msg)
    try:
        return build_bottom_up(data, _plan)
    except (ValueError, IndexError) as e:
        msg = f"Malformed s-expression: {e}"
        raise SyntaxLoadError(msg) from e


def parse_sexp_from_source(source: str) -> SyntaxNode:
    """Parse JSON text holding an s-expression dump.

    Raises:
        SyntaxLoadError: If the text is not valid JSON, is nested deeper than
            the JSON decoder supports, or does not hold a valid dump
    """
    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON: {e}"
        raise SyntaxLoadError(msg) from e
    except RecursionError as e:
        msg = "Invalid JSON: nested too deeply to decode"
        raise SyntaxLoadError(msg) from e
    return load_sexp(data)


def parse_sexp_from_file(file_path: Path) -> SyntaxNode:
    """Read and parse a JSON s-expression dump.

    Raises:
        SyntaxLoadError: If the file cannot be read or does not hold a valid dump
    """
    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read {file_path}: {e}"
        raise SyntaxLoadError(msg) from e
    logger.debug("Loading s-expression dump from %s", file_path)
    return parse_sexp_from_source(source)
