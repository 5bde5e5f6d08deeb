"""Static resolution of ``let`` names.

Only literal names are resolved. Anything that depends on a runtime value, a
local variable or the result of calling some other method, resolves to
``INDETERMINATE``. Node shapes the resolver has no rule for raise
``UnsupportedNodeError`` instead of being guessed at.
"""

import logging
from typing import assert_never

from let_override_checker.errors import UnsupportedNodeError
from let_override_checker.models import (
    INDETERMINATE,
    Block,
    Call,
    LetName,
    LocalVariableReference,
    Other,
    ResolvedName,
    Sequence,
    StringLiteral,
    SymbolLiteral,
    SyntaxNode,
)

logger = logging.getLogger(__name__)

LET_METHODS = frozenset({"let", "let!"})


def resolve_let_name(node: SyntaxNode) -> LetName:
    """Resolve the name declared by a ``let`` node.

    Accepts the declaration itself (a ``Block`` or bare ``Call``) or any node in
    its name position, unwrapping blocks, calls and statement sequences until a
    literal or an indeterminate shape is reached.

    Args:
        node: The declaration or name node

    Returns:
        ResolvedName for symbol and string literals, INDETERMINATE for local
        variables and calls to methods other than ``let``/``let!``

    Raises:
        UnsupportedNodeError: If the name is given by an unrecognized node shape

    Example:
        ``let(:foo) { 1 }`` and ``let!("foo") { 2 }`` both resolve to
        ``ResolvedName("foo")``.
    """
    current = node
    while True:
        match current:
            case Call(method=method, arguments=arguments) if method in LET_METHODS:
                if not arguments:
                    logger.debug("let call without a name argument: treating name as indeterminate")
                    return INDETERMINATE
                current = arguments[0]
            case Call(method=method):
                logger.debug("let name produced by calling %r: indeterminate", method)
                return INDETERMINATE
            case Block(call=call):
                current = call
            case Sequence(statements=(first, *_)):
                current = first
            case Sequence():
                raise UnsupportedNodeError(current)
            case LocalVariableReference(name=name):
                logger.debug("let name read from local variable %r: indeterminate", name)
                return INDETERMINATE
            case SymbolLiteral(value=value) | StringLiteral(value=value):
                return ResolvedName(value)
            case Other():
                raise UnsupportedNodeError(current)
            case _:
                assert_never(current)
