"""Core data models for the overriding-let checker.

The syntax tree is a closed union of node kinds. Nodes are immutable and are
compared by identity (``eq=False``), so two structurally identical ``let``
declarations at different places in a file stay distinct when used as
dictionary keys or collected into offenses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import final, override

OFFENSE_MESSAGE = "Do not override let."


@dataclass(frozen=True)
class SourceLocation:
    """Position of a node in its source file."""

    line: int  # 1-based
    column: int  # 0-based


@dataclass(frozen=True, eq=False)
class Call:
    """A method invocation such as ``let(:foo)`` or ``RSpec.describe``."""

    method: str
    arguments: tuple[SyntaxNode, ...] = ()
    receiver: SyntaxNode | None = None
    location: SourceLocation | None = None


@dataclass(frozen=True, eq=False)
class Block:
    """A call paired with an attached body, e.g. ``context do ... end``."""

    call: Call
    body: SyntaxNode | None = None
    location: SourceLocation | None = None


@dataclass(frozen=True, eq=False)
class Sequence:
    """An ordered list of statements (a block body, ``begin``, parentheses)."""

    statements: tuple[SyntaxNode, ...] = ()
    location: SourceLocation | None = None


@dataclass(frozen=True, eq=False)
class SymbolLiteral:
    value: str
    location: SourceLocation | None = None


@dataclass(frozen=True, eq=False)
class StringLiteral:
    value: str
    location: SourceLocation | None = None


@dataclass(frozen=True, eq=False)
class LocalVariableReference:
    name: str
    location: SourceLocation | None = None


@dataclass(frozen=True, eq=False)
class Other:
    """Catch-all for node kinds the analysis does not interpret.

    ``kind`` keeps the front-end's type tag (``"const"``, ``"int"``, ``"dsym"``...)
    and ``text`` carries a short literal payload where one exists, such as the
    name of a constant.
    """

    kind: str
    children: tuple[SyntaxNode, ...] = ()
    text: str | None = None
    location: SourceLocation | None = None


type SyntaxNode = Call | Block | Sequence | SymbolLiteral | StringLiteral | LocalVariableReference | Other


def children(node: SyntaxNode) -> tuple[SyntaxNode, ...]:
    """Return the direct children of a node in source order."""
    match node:
        case Call(receiver=receiver, arguments=arguments):
            return arguments if receiver is None else (receiver, *arguments)
        case Block(call=call, body=body):
            return (call,) if body is None else (call, body)
        case Sequence(statements=statements):
            return statements
        case Other(children=nested):
            return nested
        case SymbolLiteral() | StringLiteral() | LocalVariableReference():
            return ()


@dataclass(frozen=True)
class ResolvedName:
    """A statically known ``let`` name, normalized to its symbol spelling."""

    value: str

    @override
    def __str__(self) -> str:
        return f":{self.value}"


@final
class Indeterminate:
    """Marker for a ``let`` name that cannot be known without running the code.

    Never equal to anything, itself included, so it can neither cause nor
    prevent a match.
    """

    __slots__ = ()

    @override
    def __eq__(self, other: object) -> bool:
        return False

    @override
    def __hash__(self) -> int:
        return id(self)

    @override
    def __repr__(self) -> str:
        return "INDETERMINATE"


INDETERMINATE = Indeterminate()

type LetName = ResolvedName | Indeterminate


@dataclass(frozen=True)
class Offense:
    """A ``let`` declaration that overrides one from an enclosing example group."""

    node: SyntaxNode
    let_name: ResolvedName
    message: str = OFFENSE_MESSAGE

    @property
    def location(self) -> SourceLocation | None:
        return self.node.location


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one file."""

    file_path: str
    offenses: tuple[Offense, ...] = ()
    error: str | None = None  # set when the file could not be analyzed
    scopes_checked: int = field(default=0, compare=False)
