"""Recognition of example groups and the ``let`` declarations made directly in them.

A declaration belongs to the example group whose body contains it, looking
through statement sequences only. Declarations inside a nested example group,
or inside any other block, are not direct declarations of the outer group.
"""

import logging
from typing import Protocol

from let_override_checker.models import Block, Call, Other, Sequence, SyntaxNode
from let_override_checker.name_resolver import LET_METHODS

logger = logging.getLogger(__name__)

EXAMPLE_GROUP_METHODS = frozenset(
    {
        # Regular groups
        "describe",
        "context",
        "feature",
        "example_group",
        # Focused
        "fdescribe",
        "fcontext",
        "ffeature",
        # Skipped
        "xdescribe",
        "xcontext",
        "xfeature",
        # Shared groups
        "shared_examples",
        "shared_examples_for",
        "shared_context",
    }
)


def _is_rspec_receiver(receiver: SyntaxNode | None) -> bool:
    """Accept ``describe`` and ``RSpec.describe`` (or ``::RSpec.describe``), not ``Foo::RSpec.describe``."""
    if receiver is None:
        return True
    if not (isinstance(receiver, Other) and receiver.kind == "const" and receiver.text == "RSpec"):
        return False
    match receiver.children:
        case ():
            return True
        case (Other(kind="cbase"),):
            return True
        case _:
            return False


def is_example_group(node: SyntaxNode) -> bool:
    """Check whether a node opens a new example group scope."""
    return (
        isinstance(node, Block)
        and node.call.method in EXAMPLE_GROUP_METHODS
        and _is_rspec_receiver(node.call.receiver)
    )


def is_let_declaration(node: SyntaxNode) -> bool:
    """Check whether a node declares a ``let`` or ``let!`` binding.

    Both ``let(:a) { ... }`` and the blockless ``let(:a, &builder)`` count.
    """
    call = node.call if isinstance(node, Block) else node
    return isinstance(call, Call) and call.receiver is None and call.method in LET_METHODS


class DeclarationSource(Protocol):
    """Anything that can list the direct ``let`` declarations of an example group."""

    def direct_declarations(self, scope: Block) -> tuple[SyntaxNode, ...]: ...


class ScopeView:
    """Direct ``let`` declarations of example groups, computed once per group.

    Nodes hash by identity, so the cache is keyed by the group node itself.
    """

    def __init__(self) -> None:
        self._cache: dict[Block, tuple[SyntaxNode, ...]] = {}

    def direct_declarations(self, scope: Block) -> tuple[SyntaxNode, ...]:
        """Return the ``let`` declarations made directly in ``scope``, in source order."""
        cached = self._cache.get(scope)
        if cached is None:
            cached = _collect_direct_declarations(scope)
            self._cache[scope] = cached
        return cached


def _collect_direct_declarations(scope: Block) -> tuple[SyntaxNode, ...]:
    if scope.body is None:
        return ()

    declarations: list[SyntaxNode] = []
    # Depth-first through wrapper sequences, children pushed in reverse to keep source order
    pending: list[SyntaxNode] = [scope.body]
    while pending:
        node = pending.pop()
        if isinstance(node, Sequence):
            pending.extend(reversed(node.statements))
        elif is_let_declaration(node):
            declarations.append(node)

    logger.debug("Example group %r has %d direct let declaration(s)", scope.call.method, len(declarations))
    return tuple(declarations)
