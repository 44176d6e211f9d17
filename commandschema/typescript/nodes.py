"""Syntax nodes for TypeScript declaration source.

Only the declaration-level subset the command extractor reads is modelled:
type nodes, type members, parameters, interfaces, type aliases and imports.
Every node keeps the exact source text it was parsed from, which is what
diagnostics quote. Nodes compare by identity, like compiler AST nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

KEYWORD_TYPES = frozenset(
    {
        "any",
        "bigint",
        "boolean",
        "never",
        "null",
        "number",
        "object",
        "string",
        "symbol",
        "undefined",
        "unknown",
        "void",
    }
)


@dataclass(frozen=True, eq=False)
class Node:
    text: str

    def get_text(self) -> str:
        return self.text


# --- Type nodes ---


@dataclass(frozen=True, eq=False)
class TypeNode(Node):
    pass


@dataclass(frozen=True, eq=False)
class KeywordType(TypeNode):
    keyword: str


@dataclass(frozen=True, eq=False)
class LiteralType(TypeNode):
    literal: str | float | bool

    @property
    def is_string(self) -> bool:
        return isinstance(self.literal, str)


@dataclass(frozen=True, eq=False)
class TypeReference(TypeNode):
    """A named type, possibly dotted (``React.Ref``) and with type arguments."""

    type_name: str
    type_arguments: tuple[TypeNode, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class TypeQuery(TypeNode):
    expr_name: str


@dataclass(frozen=True, eq=False)
class ArrayType(TypeNode):
    element_type: TypeNode


@dataclass(frozen=True, eq=False)
class TupleType(TypeNode):
    elements: tuple[TypeNode, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class UnionType(TypeNode):
    types: tuple[TypeNode, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class IntersectionType(TypeNode):
    types: tuple[TypeNode, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class ParenthesizedType(TypeNode):
    type: TypeNode


@dataclass(frozen=True, eq=False)
class TypeOperator(TypeNode):
    """``keyof T``, ``readonly T[]``, ``unique symbol``."""

    operator: str
    type: TypeNode


@dataclass(frozen=True, eq=False)
class IndexedAccessType(TypeNode):
    object_type: TypeNode
    index_type: TypeNode


@dataclass(frozen=True, eq=False)
class ConditionalType(TypeNode):
    check_type: TypeNode
    extends_type: TypeNode
    true_type: TypeNode
    false_type: TypeNode


@dataclass(frozen=True, eq=False)
class FunctionType(TypeNode):
    type_parameters: tuple[TypeParameter, ...] = field(default_factory=tuple)
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)
    type: TypeNode | None = None


@dataclass(frozen=True, eq=False)
class TypeLiteral(TypeNode):
    members: tuple[Node, ...] = field(default_factory=tuple)


# --- Declarations ---


@dataclass(frozen=True, eq=False)
class TypeParameter(Node):
    name: str
    constraint: TypeNode | None = None
    default: TypeNode | None = None


@dataclass(frozen=True, eq=False)
class BindingElement(Node):
    name: str


@dataclass(frozen=True, eq=False)
class BindingPattern(Node):
    elements: tuple[BindingElement, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class Parameter(Node):
    name: str | BindingPattern
    type: TypeNode | None = None
    question_token: bool = False
    dot_dot_dot_token: bool = False

    @property
    def name_text(self) -> str:
        if isinstance(self.name, BindingPattern):
            return self.name.text
        return self.name


@dataclass(frozen=True, eq=False)
class MethodSignature(Node):
    name: str
    question_token: bool = False
    type_parameters: tuple[TypeParameter, ...] = field(default_factory=tuple)
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)
    type: TypeNode | None = None


@dataclass(frozen=True, eq=False)
class CallSignature(Node):
    type_parameters: tuple[TypeParameter, ...] = field(default_factory=tuple)
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)
    type: TypeNode | None = None


@dataclass(frozen=True, eq=False)
class PropertySignature(Node):
    name: str
    question_token: bool = False
    readonly: bool = False
    type: TypeNode | None = None


@dataclass(frozen=True, eq=False)
class IndexSignature(Node):
    parameter: Parameter
    type: TypeNode | None = None


@dataclass(frozen=True, eq=False)
class InterfaceDeclaration(Node):
    name: str
    type_parameters: tuple[TypeParameter, ...] = field(default_factory=tuple)
    heritage: tuple[TypeReference, ...] = field(default_factory=tuple)
    members: tuple[Node, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class TypeAliasDeclaration(Node):
    name: str
    type: TypeNode
    type_parameters: tuple[TypeParameter, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class ImportDeclaration(Node):
    module: str
    default: str = ""
    namespace: str = ""
    names: tuple[tuple[str, str], ...] = field(default_factory=tuple)  # (imported, local)
    type_only: bool = False

    @property
    def local_names(self) -> list[str]:
        names = [local for _, local in self.names]
        if self.default:
            names.append(self.default)
        if self.namespace:
            names.append(self.namespace)
        return names


@dataclass(frozen=True, eq=False)
class SourceFile(Node):
    path: str = "<source>"
    statements: tuple[Node, ...] = field(default_factory=tuple)

    @property
    def imports(self) -> list[ImportDeclaration]:
        return [s for s in self.statements if isinstance(s, ImportDeclaration)]

    def declarations_named(self, name: str) -> list[InterfaceDeclaration | TypeAliasDeclaration]:
        """All interface and alias declarations for ``name``, in source order."""
        return [
            s
            for s in self.statements
            if isinstance(s, (InterfaceDeclaration, TypeAliasDeclaration)) and s.name == name
        ]

    def import_of(self, local_name: str) -> ImportDeclaration | None:
        """The import that binds ``local_name``, or None if it is not imported."""
        for imp in self.imports:
            if local_name in imp.local_names:
                return imp
        return None

    def imported_from(self, local_name: str) -> str:
        """Module specifier a local name is imported from, or '' if local."""
        imp = self.import_of(local_name)
        return imp.module if imp is not None else ""

    def imported_name(self, local_name: str) -> str:
        """The name a module exports under ``local_name``.

        ``import {Int32 as I32}`` maps ``I32`` to ``Int32``. Names that are not
        imported by name map to themselves.
        """
        imp = self.import_of(local_name)
        if imp is not None:
            for imported, local in imp.names:
                if local == local_name:
                    return imported
        return local_name
