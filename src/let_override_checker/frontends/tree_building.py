"""Bottom-up conversion of a parser's tree into the syntax node model.

Front-ends describe each source node with a plan: the source children to
convert first, and a function assembling the converted children into one
syntax node. Plans are expanded in source (pre-)order and assembled after
their children, all on explicit stacks, so deeply nested input never hits
the recursion limit.
"""

from collections.abc import Callable
from dataclasses import dataclass

from let_override_checker.models import SyntaxNode

type Assembler = Callable[[list[SyntaxNode]], SyntaxNode]
type Plan[T] = tuple[list[T], Assembler]


@dataclass(frozen=True)
class _Assemble:
    arity: int
    assemble: Assembler


def build_bottom_up[T](root: T, plan: Callable[[T], Plan[T]]) -> SyntaxNode:
    """Convert ``root`` by expanding ``plan`` for every source node.

    ``plan`` is called once per source node, parents before children and
    siblings left to right, so any state it tracks sees the file in source
    order.

    Args:
        root: Root node in the parser's own representation
        plan: Returns (children to convert, assembler) for a source node

    Returns:
        The converted root
    """
    pending: list[T | _Assemble] = [root]
    converted: list[SyntaxNode] = []
    while pending:
        item = pending.pop()
        if isinstance(item, _Assemble):
            start = len(converted) - item.arity
            parts = converted[start:]
            del converted[start:]
            converted.append(item.assemble(parts))
            continue
        children, assemble = plan(item)
        pending.append(_Assemble(len(children), assemble))
        pending.extend(reversed(children))
    return converted[0]
