"""Exceptions raised while building or analyzing a syntax tree."""

from let_override_checker.models import Other, SyntaxNode


class UnsupportedNodeError(Exception):
    """A ``let`` name was given by a node shape the resolver does not understand.

    This aborts analysis of the whole tree: guessing could produce both false
    positives and false negatives. It is a tool error, never a lint offense.
    """

    def __init__(self, node: SyntaxNode) -> None:
        self.node = node
        description = node.kind if isinstance(node, Other) else type(node).__name__
        where = f" at line {node.location.line}" if node.location else ""
        super().__init__(f"Unexpected node type while resolving let name: {description}{where}")


class SyntaxLoadError(Exception):
    """A front-end could not produce a syntax tree from its input."""
