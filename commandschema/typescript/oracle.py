"""TypeScript declaration oracle: semantic queries over a parsed source file.

Resolves type nodes against the interfaces and aliases declared in one
source file. Names that are imported or otherwise not declared locally
resolve to opaque named types, so codegen aliases such as ``Int32`` are
still recognized by name without loading the module that declares them.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from commandschema.config import DEFAULT_INT32_TYPE_NAMES
from commandschema.oracle import DeclarationKind, MemberSymbol, ParameterSymbol, Signature
from commandschema.typescript.nodes import (
    ArrayType,
    BindingPattern,
    CallSignature,
    FunctionType,
    InterfaceDeclaration,
    IntersectionType,
    KeywordType,
    LiteralType,
    MethodSignature,
    Node,
    Parameter,
    ParenthesizedType,
    PropertySignature,
    SourceFile,
    TupleType,
    TypeAliasDeclaration,
    TypeLiteral,
    TypeNode,
    TypeReference,
    UnionType,
)
from commandschema.typescript.types import INTRINSIC_FLAGS, Type, TypeFlag

logger = logging.getLogger(__name__)

ARRAY_TYPE_NAMES = {"Array", "ReadonlyArray"}

_INTRINSICS = {name: Type(flag=flag) for name, flag in INTRINSIC_FLAGS.items()}


class TypeScriptOracle:
    """Type resolution over a single parsed declaration file.

    Resolved interfaces and aliases are cached per declaration, so the same
    named type always resolves to the same ``Type`` instance and recursive
    declarations terminate.
    """

    def __init__(self, source_file: SourceFile, int32_type_names: Sequence[str] = DEFAULT_INT32_TYPE_NAMES):
        self.source_file = source_file
        self.int32_type_names = frozenset(int32_type_names)
        self._named: dict[str, Type] = {}
        self._resolving: set[str] = set()

    # --- TypeOracle protocol ---

    def resolve_type(self, node: TypeNode | None) -> Type:
        if node is None:
            return _INTRINSICS["any"]

        if isinstance(node, KeywordType):
            return _INTRINSICS[node.keyword]
        if isinstance(node, LiteralType):
            return self._literal(node)
        if isinstance(node, ParenthesizedType):
            return self.resolve_type(node.type)
        if isinstance(node, ArrayType):
            return Type(flag=TypeFlag.ARRAY, types=(self.resolve_type(node.element_type),))
        if isinstance(node, TupleType):
            return Type(flag=TypeFlag.TUPLE, types=tuple(self.resolve_type(e) for e in node.elements))
        if isinstance(node, UnionType):
            return self._union([self.resolve_type(t) for t in node.types])
        if isinstance(node, IntersectionType):
            return self._intersection([self.resolve_type(t) for t in node.types], node.text)
        if isinstance(node, FunctionType):
            return Type(flag=TypeFlag.OBJECT, call_signatures=(self._signature(node),), display=node.text)
        if isinstance(node, TypeLiteral):
            return self._object_from_members(node.members, display=node.text)
        if isinstance(node, TypeReference):
            return self._resolve_reference(node)

        # typeof queries, keyof, indexed access, conditional types
        logger.debug("Treating unsupported type node as opaque: %s", node.text)
        return Type(flag=TypeFlag.OPAQUE, display=node.text)

    def get_member(self, semantic_type: Type, name: str) -> MemberSymbol | None:
        if semantic_type.flag == TypeFlag.OBJECT:
            return semantic_type.members.get(name)
        if semantic_type.flag == TypeFlag.INTERSECTION:
            for constituent in semantic_type.types:
                member = self.get_member(constituent, name)
                if member is not None:
                    return member
        return None

    def get_declarations(self, member: MemberSymbol) -> Sequence[Node]:
        return member.declarations

    def get_declaration_kind(self, declaration: Node) -> DeclarationKind:
        if isinstance(declaration, (MethodSignature, CallSignature)):
            return DeclarationKind.METHOD
        if isinstance(declaration, PropertySignature):
            return DeclarationKind.PROPERTY
        return DeclarationKind.OTHER

    def is_optional(self, declaration: Node) -> bool:
        return isinstance(declaration, (MethodSignature, PropertySignature)) and declaration.question_token

    def get_declaration_signature(self, declaration: MethodSignature | CallSignature) -> Signature:
        return self._signature(declaration)

    def get_declared_type(self, declaration: PropertySignature) -> Type:
        return self.resolve_type(declaration.type)

    def is_parameter(self, declaration: Node) -> bool:
        return isinstance(declaration, Parameter)

    def get_call_signatures(self, semantic_type: Type) -> Sequence[Signature]:
        if semantic_type.flag == TypeFlag.OBJECT:
            return semantic_type.call_signatures
        return ()

    def get_return_type(self, signature: Signature) -> Type:
        return self.resolve_type(signature.return_type_node)

    def get_parameters(self, signature: Signature) -> Sequence[ParameterSymbol]:
        return signature.parameters

    def get_type_text(self, node: TypeNode | None) -> str:
        # An unannotated parameter is implicitly any.
        return node.get_text() if node is not None else "any"

    def get_reference_name(self, node: TypeNode | None) -> str | None:
        return node.type_name if isinstance(node, TypeReference) else None

    def get_type_arguments(self, node: TypeNode) -> Sequence[TypeNode]:
        return node.type_arguments if isinstance(node, TypeReference) else ()

    def is_string_literal(self, node: TypeNode) -> bool:
        return isinstance(node, LiteralType) and node.is_string

    def is_string_like(self, semantic_type: Type) -> bool:
        if semantic_type.flag == TypeFlag.UNION:
            return all(self.is_string_like(t) for t in semantic_type.types)
        return semantic_type.flag in (TypeFlag.STRING, TypeFlag.STRING_LITERAL)

    def is_boolean_like(self, semantic_type: Type) -> bool:
        if semantic_type.flag == TypeFlag.UNION:
            return all(self.is_boolean_like(t) for t in semantic_type.types)
        return semantic_type.flag in (TypeFlag.BOOLEAN, TypeFlag.BOOLEAN_LITERAL)

    def is_int32_like(self, semantic_type: Type) -> bool:
        # Any name in the alias chain counts, qualified or not.
        return any(
            name in self.int32_type_names or name.rsplit(".", 1)[-1] in self.int32_type_names
            for name in semantic_type.aliases
        )

    def is_void_like(self, semantic_type: Type) -> bool:
        return semantic_type.flag == TypeFlag.VOID

    # --- Resolution helpers ---

    def _literal(self, node: LiteralType) -> Type:
        if isinstance(node.literal, bool):
            return Type(flag=TypeFlag.BOOLEAN_LITERAL, literal=node.literal)
        if isinstance(node.literal, str):
            return Type(flag=TypeFlag.STRING_LITERAL, literal=node.literal)
        return Type(flag=TypeFlag.NUMBER_LITERAL, literal=node.literal)

    def _union(self, types: list[Type]) -> Type:
        flat: list[Type] = []
        for t in types:
            if t.flag == TypeFlag.UNION and not t.alias_name:
                flat.extend(t.types)
            else:
                flat.append(t)
        if len(flat) == 1:
            return flat[0]
        return Type(flag=TypeFlag.UNION, types=tuple(flat))

    def _intersection(self, types: list[Type], display: str) -> Type:
        if all(t.is_object for t in types):
            merged = Type(flag=TypeFlag.OBJECT, display=display)
            for t in types:
                for name, member in t.members.items():
                    _add_declarations(merged.members, name, member.declarations)
                merged.call_signatures += t.call_signatures
            return merged
        return Type(flag=TypeFlag.INTERSECTION, types=tuple(types), display=display)

    def _resolve_reference(self, node: TypeReference) -> Type:
        name = node.type_name

        if name in ARRAY_TYPE_NAMES and len(node.type_arguments) == 1:
            return Type(flag=TypeFlag.ARRAY, types=(self.resolve_type(node.type_arguments[0]),))

        declarations = self.source_file.declarations_named(name)
        if not declarations:
            return self._opaque_reference(node)

        if name in self._named:
            return self._named[name]
        if name in self._resolving:
            logger.debug("Circular type alias %s resolves to any", name)
            return _INTRINSICS["any"]

        interfaces = [d for d in declarations if isinstance(d, InterfaceDeclaration)]
        if interfaces:
            return self._resolve_interfaces(name, interfaces)

        alias = next(d for d in declarations if isinstance(d, TypeAliasDeclaration))
        self._resolving.add(name)
        try:
            target = self.resolve_type(alias.type)
        finally:
            self._resolving.discard(name)

        # Object types keep their identity; everything else records the alias
        # chain, the way Int32 = number is told apart from number.
        resolved = target if target.is_object else replace(target, aliases=(name,) + target.aliases)
        self._named[name] = resolved
        return resolved

    def _opaque_reference(self, node: TypeReference) -> Type:
        """A name with no local declaration: imported, global or namespaced.

        It stays a named opaque type. A renamed import also records the name
        its module exports, so ``import {Int32 as I32}`` still reads as Int32.
        """
        name = node.type_name
        aliases = (name,)
        module = self.source_file.imported_from(name)
        if module:
            imported = self.source_file.imported_name(name)
            if imported != name:
                aliases += (imported,)
            logger.debug("Type %s is imported from %s as %s", name, module, imported)
        return Type(flag=TypeFlag.OPAQUE, aliases=aliases, display=node.text)

    def _resolve_interfaces(self, name: str, interfaces: list[InterfaceDeclaration]) -> Type:
        resolved = Type(flag=TypeFlag.OBJECT, display=name)
        # Registered before filling members so self-references terminate.
        self._named[name] = resolved

        inherited: dict[str, MemberSymbol] = {}
        for decl in interfaces:
            for base_ref in decl.heritage:
                base = self.resolve_type(base_ref)
                if not base.is_object:
                    continue
                for member_name, member in base.members.items():
                    if member_name not in inherited:
                        inherited[member_name] = member
                resolved.call_signatures += base.call_signatures

        own: dict[str, MemberSymbol] = {}
        own_signatures: list[Signature] = []
        for decl in interfaces:
            self._collect_members(decl.members, own, own_signatures)

        resolved.members.update({k: v for k, v in inherited.items() if k not in own})
        resolved.members.update(own)
        if own_signatures:
            resolved.call_signatures = tuple(own_signatures)
        return resolved

    def _object_from_members(self, members: Sequence[Node], display: str) -> Type:
        table: dict[str, MemberSymbol] = {}
        signatures: list[Signature] = []
        self._collect_members(members, table, signatures)
        return Type(
            flag=TypeFlag.OBJECT,
            members=table,
            call_signatures=tuple(signatures),
            display=display,
        )

    def _collect_members(
        self, members: Sequence[Node], table: dict[str, MemberSymbol], signatures: list[Signature]
    ) -> None:
        for member in members:
            if isinstance(member, (MethodSignature, PropertySignature)):
                _add_declarations(table, member.name, (member,))
            elif isinstance(member, CallSignature):
                signatures.append(self._signature(member))

    def _signature(self, node: MethodSignature | CallSignature | FunctionType) -> Signature:
        return Signature(
            declaration=node,
            type_parameters=node.type_parameters,
            parameters=tuple(self._parameter_symbol(p) for p in node.parameters),
            return_type_node=node.type,
        )

    def _parameter_symbol(self, param: Parameter) -> ParameterSymbol:
        if isinstance(param.name, BindingPattern):
            # A destructured parameter is seen through its binding elements.
            return ParameterSymbol(
                name=param.name_text, declarations=param.name.elements, type_node=param.type
            )
        return ParameterSymbol(name=param.name, declarations=(param,), type_node=param.type)


def _add_declarations(table: dict[str, MemberSymbol], name: str, declarations: tuple[Node, ...]) -> None:
    existing = table.get(name)
    if existing is None:
        table[name] = MemberSymbol(name=name, declarations=tuple(declarations))
    else:
        table[name] = MemberSymbol(name=name, declarations=existing.declarations + tuple(declarations))
