"""Single-pass detection of ``let`` declarations that override an outer ``let``.

Every example group is visited once. For each ``let`` made directly in it, the
chain of enclosing example groups is searched for a direct declaration of the
same name; a hit is an offense on the inner declaration.
"""

import logging

from let_override_checker.models import Block, Offense, ResolvedName, SyntaxNode
from let_override_checker.name_resolver import resolve_let_name
from let_override_checker.scope_tracker import build_parent_index, is_declared_in_ancestors
from let_override_checker.scope_view import DeclarationSource, ScopeView, is_example_group
from let_override_checker.syntax_visitors.syntax_visitor import SyntaxVisitor

logger = logging.getLogger(__name__)


class OverridingLetChecker(SyntaxVisitor):
    """Collects an offense for every ``let`` shadowing one from an enclosing group.

    Attributes:
        offenses: Offenses in the order they were found (source order)
        scopes_checked: Number of example groups visited
    """

    def __init__(self, root: SyntaxNode, declarations: DeclarationSource | None = None) -> None:
        """Prepare a checker for one tree; call ``visit(root)`` to run it."""
        super().__init__()
        self.offenses: list[Offense] = []
        self.scopes_checked = 0
        self._parents = build_parent_index(root)
        self._declarations: DeclarationSource = declarations or ScopeView()

    def visit_Block(self, node: Block) -> None:
        """Check the direct ``let`` declarations of an example group."""
        if not is_example_group(node):
            return
        self.scopes_checked += 1

        lets = self._declarations.direct_declarations(node)
        if not lets:
            return

        for let_node in lets:
            let_name = resolve_let_name(let_node)
            if not isinstance(let_name, ResolvedName):
                continue
            if is_declared_in_ancestors(node, let_name, self._parents, self._declarations):
                logger.debug("let %s overrides a declaration from an enclosing group", let_name)
                self.offenses.append(Offense(node=let_node, let_name=let_name))
