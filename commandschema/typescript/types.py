"""Semantic types produced by the TypeScript declaration oracle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from commandschema.oracle import MemberSymbol, Signature


class TypeFlag(Enum):
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    VOID = "void"
    UNDEFINED = "undefined"
    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    SYMBOL = "symbol"
    NON_PRIMITIVE = "object"  # The 'object' keyword
    STRING_LITERAL = "string_literal"
    NUMBER_LITERAL = "number_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    OBJECT = "object_type"  # Interfaces, type literals, function types
    ARRAY = "array"
    TUPLE = "tuple"
    UNION = "union"
    INTERSECTION = "intersection"
    OPAQUE = "opaque"  # Imported or otherwise unresolvable named type


@dataclass(eq=False)
class Type:
    """A resolved type.

    ``aliases`` holds every name the type was reached through, outermost
    first: for ``type Duration = Int32`` with ``Int32`` imported, that is
    ``("Duration", "Int32")``. Object types carry no aliases.
    """

    flag: TypeFlag
    aliases: tuple[str, ...] = field(default_factory=tuple)
    literal: str | float | bool | None = None
    types: tuple[Type, ...] = field(default_factory=tuple)
    members: dict[str, MemberSymbol] = field(default_factory=dict)
    call_signatures: tuple[Signature, ...] = field(default_factory=tuple)
    display: str = ""

    @property
    def alias_name(self) -> str:
        return self.aliases[0] if self.aliases else ""

    @property
    def is_object(self) -> bool:
        return self.flag == TypeFlag.OBJECT

    def __str__(self) -> str:
        if self.alias_name:
            return self.alias_name
        if self.display:
            return self.display
        if self.flag == TypeFlag.STRING_LITERAL:
            return repr(self.literal)
        if self.flag == TypeFlag.NUMBER_LITERAL:
            return f"{self.literal:g}"
        if self.flag == TypeFlag.BOOLEAN_LITERAL:
            return str(self.literal).lower()
        if self.flag in (TypeFlag.UNION, TypeFlag.INTERSECTION):
            sep = " | " if self.flag == TypeFlag.UNION else " & "
            return sep.join(str(t) for t in self.types)
        if self.flag == TypeFlag.ARRAY and self.types:
            return f"{self.types[0]}[]"
        return self.flag.value


INTRINSIC_FLAGS = {
    "any": TypeFlag.ANY,
    "unknown": TypeFlag.UNKNOWN,
    "never": TypeFlag.NEVER,
    "void": TypeFlag.VOID,
    "undefined": TypeFlag.UNDEFINED,
    "null": TypeFlag.NULL,
    "string": TypeFlag.STRING,
    "number": TypeFlag.NUMBER,
    "boolean": TypeFlag.BOOLEAN,
    "bigint": TypeFlag.BIGINT,
    "symbol": TypeFlag.SYMBOL,
    "object": TypeFlag.NON_PRIMITIVE,
}
