"""Walking the chain of enclosing example groups.

Nodes do not carry parent pointers. Instead a parent index is built once per
tree, and the walk outward from an example group follows it iteratively, so
deeply nested groups never hit the recursion limit.

Key Components:
    - build_parent_index: one pass over the tree recording each node's parent
    - enclosing_scopes: strict ancestor example groups, nearest first
    - is_declared_in_ancestors: the shadowing question itself
"""

from collections.abc import Iterator, Mapping

from let_override_checker.models import Block, Indeterminate, LetName, SyntaxNode, children
from let_override_checker.name_resolver import resolve_let_name
from let_override_checker.scope_view import DeclarationSource, is_example_group

type ParentIndex = Mapping[SyntaxNode, SyntaxNode]


def build_parent_index(root: SyntaxNode) -> ParentIndex:
    """Map every node in the tree to its parent.

    The root has no entry. Nodes hash by identity, so structurally equal
    subtrees at different positions get separate entries.

    Args:
        root: Root of the syntax tree

    Returns:
        Mapping from child node to parent node
    """
    parents: dict[SyntaxNode, SyntaxNode] = {}
    pending = [root]
    while pending:
        node = pending.pop()
        for child in children(node):
            parents[child] = node
            pending.append(child)
    return parents


def enclosing_scopes(node: SyntaxNode, parents: ParentIndex) -> Iterator[Block]:
    """Yield the example groups strictly enclosing ``node``, nearest first.

    Example:
        For the inner ``context`` in ``describe { context { ... } }`` this yields
        only the ``describe`` block.
    """
    current = parents.get(node)
    while current is not None:
        if isinstance(current, Block) and is_example_group(current):
            yield current
        current = parents.get(current)


def _declares(scope: Block, name: LetName, declarations: DeclarationSource) -> bool:
    for declaration in declarations.direct_declarations(scope):
        upper_name = resolve_let_name(declaration)
        if isinstance(upper_name, Indeterminate):
            continue
        if upper_name == name:
            return True
    return False


def is_declared_in_ancestors(
    scope: Block, name: LetName, parents: ParentIndex, declarations: DeclarationSource
) -> bool:
    """Check whether an enclosing example group already declares ``name``.

    Indeterminate names never match: an indeterminate ``name`` is not looked up
    at all, and indeterminate ancestor declarations are skipped.

    Args:
        scope: The example group containing the declaration being checked
        name: Resolved name of that declaration
        parents: Parent index of the tree containing ``scope``
        declarations: Source of direct declarations per example group

    Returns:
        True if any strict ancestor group directly declares the same name
    """
    if isinstance(name, Indeterminate):
        return False
    return any(_declares(ancestor, name, declarations) for ancestor in enclosing_scopes(scope, parents))
