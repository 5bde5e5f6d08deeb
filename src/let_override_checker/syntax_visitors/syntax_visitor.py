"""Visitor base class for the syntax tree.

Works like ``ast.NodeVisitor``: subclasses define ``visit_<Kind>`` methods
(``visit_Block``, ``visit_Call``...). Traversal uses an explicit stack, so
every node is visited exactly once in source (pre-)order without recursion.
"""

from collections.abc import Callable, Iterator

from let_override_checker.models import SyntaxNode, children


def walk(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield every node of the tree in source order, parents before children."""
    pending = [root]
    while pending:
        node = pending.pop()
        yield node
        pending.extend(reversed(children(node)))


class SyntaxVisitor:
    """Dispatches each node of a tree to its ``visit_<Kind>`` method, if any."""

    def visit(self, root: SyntaxNode) -> None:
        for node in walk(root):
            handler: Callable[[SyntaxNode], None] | None = getattr(self, f"visit_{type(node).__name__}", None)
            if handler is not None:
                handler(node)
