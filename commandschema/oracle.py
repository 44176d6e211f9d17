"""Type resolution oracle: the semantic capability the extractor is driven by.

The extractor never inspects syntax or types itself. It hands opaque syntax
nodes to an oracle and asks it what kind of declaration a member is, for
members, call signatures, return types, and the handful of type-category
predicates it needs. Any class with matching methods satisfies
``TypeOracle`` (structural subtyping); tests use an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence, runtime_checkable

# The oracle owns its syntax and semantic type representations; the
# extractor only passes these values back to the oracle.
SyntaxNode = Any
SemanticType = Any


class DeclarationKind(Enum):
    METHOD = "method"  # Method signature or call signature
    PROPERTY = "property"
    OTHER = "other"


@dataclass(eq=False)
class MemberSymbol:
    """A named member of a type and every site that declares it."""

    name: str
    declarations: tuple[SyntaxNode, ...] = field(default_factory=tuple)


@dataclass(eq=False)
class ParameterSymbol:
    """A parameter as seen through a signature.

    ``name`` is the binding as written, e.g. ``viewRef`` or ``{x, y}``.
    ``type_node`` is the parameter's annotation, None when it has none.
    """

    name: str
    declarations: tuple[SyntaxNode, ...] = field(default_factory=tuple)
    type_node: SyntaxNode | None = None


@dataclass(eq=False)
class Signature:
    """A call signature of a callable type or declaration."""

    declaration: SyntaxNode | None = None
    type_parameters: tuple[SyntaxNode, ...] = field(default_factory=tuple)
    parameters: tuple[ParameterSymbol, ...] = field(default_factory=tuple)
    return_type_node: SyntaxNode | None = None

    @property
    def is_generic(self) -> bool:
        return len(self.type_parameters) != 0


@runtime_checkable
class TypeOracle(Protocol):
    """Semantic queries over an already-loaded declaration model."""

    def resolve_type(self, node: SyntaxNode | None) -> SemanticType:
        """Resolve a syntactic type node; a missing annotation resolves to ``any``."""
        ...

    def get_member(self, semantic_type: SemanticType, name: str) -> MemberSymbol | None:
        ...

    def get_declarations(self, member: MemberSymbol) -> Sequence[SyntaxNode]:
        ...

    # --- Declarations ---

    def get_declaration_kind(self, declaration: SyntaxNode) -> DeclarationKind:
        ...

    def is_optional(self, declaration: SyntaxNode) -> bool:
        """True for members declared with ``?``."""
        ...

    def get_declaration_signature(self, declaration: SyntaxNode) -> Signature:
        """The signature of a METHOD declaration."""
        ...

    def get_declared_type(self, declaration: SyntaxNode) -> SemanticType:
        """The resolved annotation of a PROPERTY declaration."""
        ...

    def is_parameter(self, declaration: SyntaxNode) -> bool:
        """True when a parameter symbol's declaration is a plain parameter node."""
        ...

    # --- Signatures ---

    def get_call_signatures(self, semantic_type: SemanticType) -> Sequence[Signature]:
        """Call signatures of a type; empty when it is not callable."""
        ...

    def get_return_type(self, signature: Signature) -> SemanticType:
        ...

    def get_parameters(self, signature: Signature) -> Sequence[ParameterSymbol]:
        ...

    # --- Type nodes ---

    def get_type_text(self, node: SyntaxNode | None) -> str:
        """Source text of a type node; ``any`` for a missing annotation."""
        ...

    def get_reference_name(self, node: SyntaxNode | None) -> str | None:
        """Name of a type reference node (``React.Ref``), None for any other node."""
        ...

    def get_type_arguments(self, node: SyntaxNode) -> Sequence[SyntaxNode]:
        ...

    def is_string_literal(self, node: SyntaxNode) -> bool:
        ...

    # --- Type categories ---

    def is_string_like(self, semantic_type: SemanticType) -> bool:
        ...

    def is_boolean_like(self, semantic_type: SemanticType) -> bool:
        ...

    def is_int32_like(self, semantic_type: SemanticType) -> bool:
        ...

    def is_void_like(self, semantic_type: SemanticType) -> bool:
        ...
