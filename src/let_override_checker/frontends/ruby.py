"""Build syntax trees from Ruby source with tree-sitter.

The concrete tree-sitter-ruby tree is folded into the small node model the
checker understands: calls (with their receiver, arguments and attached
block), statement sequences, symbol and string literals and local variable
reads. Everything else is kept as ``Other`` with its grammar type as ``kind``.
Constants become ``Other(kind="const")`` holding their scope as a child, with
``Other(kind="cbase")`` standing for the top-level namespace of ``::Name``.

tree-sitter does not tell local variables apart from receiverless method calls
with no arguments; both are plain ``identifier`` nodes. An identifier counts as
a local variable read when the same name was assigned (or bound as a block
parameter) earlier in the file, otherwise as a method call. The file-wide name
set is coarser than Ruby's per-scope rules, but either reading leaves the
``let`` name indeterminate.

Escape sequences in non-interpolated literals are decoded, so ``'it\\'s'`` and
``:"it's"`` carry the same value. Control and meta escapes (``\\C-x``,
``\\M-x``) are kept as written.
"""

import logging
import re
from pathlib import Path

import tree_sitter_ruby as tsruby
from tree_sitter import Language, Node, Parser

from let_override_checker.errors import SyntaxLoadError
from let_override_checker.frontends.tree_building import Plan, build_bottom_up
from let_override_checker.models import (
    Block,
    Call,
    LocalVariableReference,
    Other,
    Sequence,
    SourceLocation,
    StringLiteral,
    SymbolLiteral,
    SyntaxNode,
)

logger = logging.getLogger(__name__)

RUBY_LANGUAGE = Language(tsruby.language())

CALL_TYPES = frozenset({"call", "method_call"})
BLOCK_TYPES = frozenset({"block", "do_block"})
BODY_TYPES = frozenset({"block_body", "body_statement"})
SEQUENCE_TYPES = frozenset({"program", "parenthesized_statements", "begin"})
SKIPPED_TYPES = frozenset({"comment", "block_parameters", "uninterpreted"})
LITERAL_PART_TYPES = frozenset({"string_content", "escape_sequence"})

SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "s": " ",
    "r": "\r",
    "e": "\x1b",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\n": "",
}
SINGLE_QUOTED_ESCAPE = re.compile(r"\\([\\'])")


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="ignore") if node.text else ""


def _location(node: Node) -> SourceLocation:
    return SourceLocation(line=node.start_point.row + 1, column=node.start_point.column)


def _leaf(node: SyntaxNode) -> Plan[Node]:
    return [], lambda _parts: node


def _statements(node: Node) -> list[Node]:
    """Named children of a body-like node, with nested body wrappers flattened."""
    result: list[Node] = []
    pending = list(reversed(node.named_children))
    while pending:
        child = pending.pop()
        if child.type in SKIPPED_TYPES:
            continue
        if child.type in BODY_TYPES:
            pending.extend(reversed(child.named_children))
        else:
            result.append(child)
    return result


def _decode_escape(text: str) -> str:
    """Value of one double-quoted escape sequence such as ``\\n`` or ``\\u00e9``."""
    body = text[1:]
    try:
        if body.startswith("u"):
            return "".join(chr(int(code, 16)) for code in body[1:].strip("{}").split())
        if body.startswith("x"):
            return chr(int(body[1:], 16))
        if body[:1].isdigit():
            return chr(int(body, 8))
    except ValueError:
        return text
    if len(body) != 1:
        return text
    return SIMPLE_ESCAPES.get(body, body)


def _is_single_quoted(node: Node) -> bool:
    return _text(node).removeprefix(":").startswith(("'", "%q"))


def _literal_value(parts: list[Node], *, single_quoted: bool) -> str:
    if single_quoted:
        return "".join(SINGLE_QUOTED_ESCAPE.sub(r"\1", _text(part)) for part in parts)
    return "".join(_decode_escape(_text(part)) if part.type == "escape_sequence" else _text(part) for part in parts)


def _plan_scope_resolution(node: Node) -> Plan[Node]:
    location = _location(node)
    name_node = node.child_by_field_name("name")
    name = _text(name_node or node)
    scope_node = node.child_by_field_name("scope")
    if scope_node is None:
        # ::Name
        cbase = Other(kind="cbase", location=location)
        return _leaf(Other(kind="const", children=(cbase,), text=name, location=location))
    return [scope_node], lambda parts: Other(kind="const", children=tuple(parts), text=name, location=location)


class _TreeBuilder:
    """Converts one tree-sitter tree, tracking local variable names as it goes."""

    def __init__(self) -> None:
        self.local_variables: set[str] = set()

    def build(self, root: Node) -> SyntaxNode:
        return build_bottom_up(root, self._plan)

    def _plan(self, node: Node) -> Plan[Node]:  # noqa: PLR0911
        kind = node.type
        location = _location(node)

        if kind in CALL_TYPES:
            return self._plan_call(node)

        if kind in SEQUENCE_TYPES:
            return _statements(node), lambda parts: Sequence(statements=tuple(parts), location=location)

        if kind == "identifier":
            name = _text(node)
            if name in self.local_variables:
                return _leaf(LocalVariableReference(name=name, location=location))
            return _leaf(Call(method=name, location=location))

        if kind == "simple_symbol":
            return _leaf(SymbolLiteral(value=_text(node).removeprefix(":"), location=location))

        if kind in {"delimited_symbol", "string"}:
            return self._plan_quoted(node)

        if kind == "constant":
            return _leaf(Other(kind="const", text=_text(node), location=location))

        if kind == "scope_resolution":
            return _plan_scope_resolution(node)

        if kind in {"assignment", "operator_assignment"}:
            self._track_assignment(node)

        children = [child for child in node.named_children if child.type not in SKIPPED_TYPES]
        return children, lambda parts: Other(kind=kind, children=tuple(parts), location=location)

    def _plan_call(self, node: Node) -> Plan[Node]:
        location = _location(node)
        method_node = node.child_by_field_name("method")
        receiver_node = node.child_by_field_name("receiver")
        arguments_node = node.child_by_field_name("arguments")
        block_node = node.child_by_field_name("block")

        if method_node is None:
            # Implicit call syntax such as foo.()
            return list(node.named_children), lambda parts: Other(
                kind=node.type, children=tuple(parts), location=location
            )

        method = _text(method_node)
        receiver = [receiver_node] if receiver_node is not None else []
        arguments: list[Node] = []
        if arguments_node is not None:
            arguments = [child for child in arguments_node.named_children if child.type != "comment"]

        statements: list[Node] = []
        block_location: SourceLocation | None = None
        if block_node is not None and block_node.type in BLOCK_TYPES:
            self._track_block_parameters(block_node)
            statements = _statements(block_node)
            block_location = _location(block_node)

        def assemble(parts: list[SyntaxNode]) -> SyntaxNode:
            converted_receiver = parts[0] if receiver else None
            rest = parts[len(receiver) :]
            call = Call(
                method=method,
                arguments=tuple(rest[: len(arguments)]),
                receiver=converted_receiver,
                location=location,
            )
            if block_location is None:
                return call
            body_statements = tuple(rest[len(arguments) :])
            body = Sequence(statements=body_statements, location=block_location) if body_statements else None
            return Block(call=call, body=body, location=location)

        return [*receiver, *arguments, *statements], assemble

    def _plan_quoted(self, node: Node) -> Plan[Node]:
        location = _location(node)
        parts = [child for child in node.named_children if child.type != "comment"]
        if any(part.type not in LITERAL_PART_TYPES for part in parts):
            # Interpolated: the value is only known at runtime
            kind = "dsym" if node.type == "delimited_symbol" else "dstr"
            return parts, lambda converted: Other(kind=kind, children=tuple(converted), location=location)

        value = _literal_value(parts, single_quoted=_is_single_quoted(node))
        if node.type == "delimited_symbol":
            return _leaf(SymbolLiteral(value=value, location=location))
        return _leaf(StringLiteral(value=value, location=location))

    def _track_assignment(self, node: Node) -> None:
        left = node.child_by_field_name("left")
        if left is not None and left.type == "identifier":
            self.local_variables.add(_text(left))

    def _track_block_parameters(self, block_node: Node) -> None:
        parameters = block_node.child_by_field_name("parameters")
        if parameters is None:
            return
        for parameter in parameters.named_children:
            if parameter.type == "identifier":
                self.local_variables.add(_text(parameter))


def parse_ruby_from_source(source: str, filename: str) -> SyntaxNode:
    """Parse Ruby source code into a syntax tree.

    Args:
        source: Ruby source code as a string
        filename: Filename to use in error messages

    Returns:
        Root ``Sequence`` holding the file's top-level statements

    Raises:
        SyntaxLoadError: If the source contains syntax errors
    """
    parser = Parser(RUBY_LANGUAGE)
    tree = parser.parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        msg = f"Syntax error in {filename}"
        raise SyntaxLoadError(msg)
    return _TreeBuilder().build(tree.root_node)


def parse_ruby_from_file(file_path: Path) -> SyntaxNode:
    """Read and parse a Ruby file.

    Raises:
        SyntaxLoadError: If the file cannot be read or has syntax errors
    """
    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read {file_path}: {e}"
        raise SyntaxLoadError(msg) from e
    logger.debug("Parsing Ruby source from %s", file_path)
    return parse_ruby_from_source(source, str(file_path))
