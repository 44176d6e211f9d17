"""TypeScript declaration parser: builds syntax nodes from component spec source.

Source is parsed with tree-sitter's TypeScript grammar; the concrete tree is
then mapped onto the declaration nodes in ``nodes``. Interfaces, type aliases
and imports are mapped in full. Every other statement (consts, functions,
enums, default exports) is left alone, since commands are only ever declared
through types.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import tree_sitter_typescript
from tree_sitter import Language, Parser

from commandschema.typescript.nodes import (
    KEYWORD_TYPES,
    ArrayType,
    BindingElement,
    BindingPattern,
    CallSignature,
    ConditionalType,
    FunctionType,
    ImportDeclaration,
    IndexedAccessType,
    IndexSignature,
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
    TypeOperator,
    TypeParameter,
    TypeQuery,
    TypeReference,
    UnionType,
)

logger = logging.getLogger(__name__)

LANGUAGES = {
    "typescript": Language(tree_sitter_typescript.language_typescript()),
    "tsx": Language(tree_sitter_typescript.language_tsx()),
}

# Placeholder alias a standalone type expression is parsed inside.
TYPE_HOLDER = "type __commandschema_type__ = "

# Statement wrappers whose inner declaration is mapped like a bare one.
DECLARATION_WRAPPERS = {"export_statement", "ambient_declaration"}

TYPE_OPERATORS = {"index_type_query": "keyof", "readonly_type": "readonly"}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}

ESCAPE_RE = re.compile(r"\\(?:u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|x([0-9a-fA-F]{2}))")

_parsers: dict[str, Parser] = {}


class TypeScriptSyntaxError(ValueError):
    """Raised when declaration source is not valid TypeScript."""

    def __init__(self, message: str, line: int, column: int, path: str = "<source>"):
        super().__init__(f"{path}:{line}:{column}: {message}")
        self.line = line
        self.column = column
        self.path = path


def parse_source(source: str, path: str = "<source>") -> SourceFile:
    """Parse TypeScript declaration source into a SourceFile node."""
    data = source.encode("utf-8")
    tree = _get_parser(_language_for(path)).parse(data)
    _raise_on_error(tree.root_node, path)
    return _TreeMapper(data).source_file(tree.root_node, path)


def parse_file(file_path: str | Path) -> SourceFile:
    """Parse a .ts/.tsx/.d.ts file from disk."""
    file_path = Path(file_path)
    return parse_source(file_path.read_text(encoding="utf-8"), str(file_path))


def parse_type(source: str) -> TypeNode:
    """Parse a standalone type expression such as ``NativeCommands``."""
    data = f"{TYPE_HOLDER}{source};".encode("utf-8")
    tree = _get_parser("typescript").parse(data)
    _raise_on_error(tree.root_node, "<type>", column_offset=len(TYPE_HOLDER))

    statements = _named(tree.root_node)
    if len(statements) != 1 or statements[0].type != "type_alias_declaration":
        raise TypeScriptSyntaxError("expected a single type expression", 1, 1, "<type>")
    return _TreeMapper(data).type_node(statements[0].child_by_field_name("value"))


def _get_parser(language: str) -> Parser:
    """Get or create the tree-sitter parser for a grammar."""
    if language not in _parsers:
        parser = Parser()
        parser.language = LANGUAGES[language]
        _parsers[language] = parser
    return _parsers[language]


def _language_for(path: str) -> str:
    return "tsx" if path.endswith(".tsx") else "typescript"


def _raise_on_error(root: Any, path: str, column_offset: int = 0) -> None:
    if not root.has_error:
        return
    node = _first_error(root) or root
    row, column = node.start_point[0], node.start_point[1]
    if row == 0:
        column = max(column - column_offset, 0)
    if node.is_missing:
        message = f"missing '{node.type}'"
    else:
        snippet = _safe_decode(node.text or b"").splitlines()
        message = f"unexpected {snippet[0][:40]!r}" if snippet else "unexpected end of input"
    raise TypeScriptSyntaxError(message, row + 1, column + 1, path)


def _first_error(node: Any) -> Any | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _named(node: Any) -> list[Any]:
    """Named children, without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def _has_token(node: Any, token: str) -> bool:
    return any(c.type == token for c in node.children)


def _safe_decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _unescape(sequence: str) -> str:
    """Decode one escape sequence, backslash included."""
    match = ESCAPE_RE.fullmatch(sequence)
    if match:
        return chr(int(next(g for g in match.groups() if g), 16))
    body = sequence[1:]
    if body and body[0] in "\r\n\u2028\u2029":
        return ""  # Line continuation
    return ESCAPES.get(body, body)


def _number_value(text: str) -> float:
    text = "".join(text.split()).replace("_", "").rstrip("n")
    try:
        return float(int(text, 0))
    except ValueError:
        return float(text)


class _TreeMapper:
    """Maps a tree-sitter TypeScript tree onto declaration nodes."""

    def __init__(self, source: bytes):
        self.source = source

    def text(self, node: Any) -> str:
        return _safe_decode(self.source[node.start_byte:node.end_byte])

    # --- Statements ---

    def source_file(self, root: Any, path: str) -> SourceFile:
        statements: list[Node] = []
        for child in _named(root):
            statement = self.statement(child)
            if statement is not None:
                statements.append(statement)
        return SourceFile(text=self.text(root), path=path, statements=tuple(statements))

    def statement(self, node: Any) -> Node | None:
        if node.type == "import_statement":
            return self.import_declaration(node)
        if node.type == "interface_declaration":
            return self.interface(node)
        if node.type == "type_alias_declaration":
            return self.type_alias(node)
        if node.type in DECLARATION_WRAPPERS:
            for child in _named(node):
                if child.type in ("interface_declaration", "type_alias_declaration"):
                    return self.statement(child)
        return None

    def import_declaration(self, node: Any) -> ImportDeclaration:
        default = ""
        namespace = ""
        names: list[tuple[str, str]] = []

        for clause in _named(node):
            if clause.type != "import_clause":
                continue
            for child in _named(clause):
                if child.type == "identifier":
                    default = self.text(child)
                elif child.type == "namespace_import":
                    namespace = self.text(_named(child)[0])
                elif child.type == "named_imports":
                    for spec in _named(child):
                        if spec.type == "import_specifier":
                            names.append(self.import_specifier(spec))

        source = node.child_by_field_name("source")
        return ImportDeclaration(
            text=self.text(node),
            module=self.string_value(source) if source is not None else "",
            default=default,
            namespace=namespace,
            names=tuple(names),
            type_only=_has_token(node, "type"),
        )

    def import_specifier(self, node: Any) -> tuple[str, str]:
        name_node = node.child_by_field_name("name")
        imported = self.string_value(name_node) if name_node.type == "string" else self.text(name_node)
        alias = node.child_by_field_name("alias")
        return imported, self.text(alias) if alias is not None else imported

    def interface(self, node: Any) -> InterfaceDeclaration:
        heritage: list[TypeReference] = []
        for child in _named(node):
            if child.type in ("extends_type_clause", "extends_clause"):
                for base in _named(child):
                    base_type = self.type_node(base)
                    if isinstance(base_type, TypeReference):
                        heritage.append(base_type)

        return InterfaceDeclaration(
            text=self.text(node),
            name=self.text(node.child_by_field_name("name")),
            type_parameters=self.type_parameters(node.child_by_field_name("type_parameters")),
            heritage=tuple(heritage),
            members=self.members(node.child_by_field_name("body")),
        )

    def type_alias(self, node: Any) -> TypeAliasDeclaration:
        return TypeAliasDeclaration(
            text=self.text(node),
            name=self.text(node.child_by_field_name("name")),
            type=self.type_node(node.child_by_field_name("value")),
            type_parameters=self.type_parameters(node.child_by_field_name("type_parameters")),
        )

    # --- Type members ---

    def members(self, body: Any) -> tuple[Node, ...]:
        members: list[Node] = []
        for child in _named(body):
            member = self.member(child)
            if member is not None:
                members.append(member)
        return tuple(members)

    def member(self, node: Any) -> Node | None:
        if node.type == "method_signature":
            return MethodSignature(
                text=self.text(node),
                name=self.property_name(node.child_by_field_name("name")),
                question_token=_has_token(node, "?"),
                type_parameters=self.type_parameters(node.child_by_field_name("type_parameters")),
                parameters=self.parameters(node.child_by_field_name("parameters")),
                type=self.annotation(node.child_by_field_name("return_type")),
            )
        if node.type == "property_signature":
            return PropertySignature(
                text=self.text(node),
                name=self.property_name(node.child_by_field_name("name")),
                question_token=_has_token(node, "?"),
                readonly=_has_token(node, "readonly"),
                type=self.annotation(node.child_by_field_name("type")),
            )
        if node.type == "call_signature":
            return CallSignature(
                text=self.text(node),
                type_parameters=self.type_parameters(node.child_by_field_name("type_parameters")),
                parameters=self.parameters(node.child_by_field_name("parameters")),
                type=self.annotation(node.child_by_field_name("return_type")),
            )
        if node.type == "index_signature":
            return self.index_signature(node)

        logger.debug("Skipping %s member: %s", node.type, self.text(node))
        return None

    def index_signature(self, node: Any) -> IndexSignature:
        name = node.child_by_field_name("name")
        key_type = node.child_by_field_name("index_type")
        parameter = Parameter(
            text=self.text(name) if name is not None else "",
            name=self.text(name) if name is not None else "",
            type=self.type_node(key_type) if key_type is not None else None,
        )
        return IndexSignature(
            text=self.text(node),
            parameter=parameter,
            type=self.annotation(node.child_by_field_name("type")),
        )

    def property_name(self, node: Any) -> str:
        if node.type == "string":
            return self.string_value(node)
        return self.text(node)

    # --- Parameters ---

    def type_parameters(self, node: Any | None) -> tuple[TypeParameter, ...]:
        if node is None:
            return ()
        params: list[TypeParameter] = []
        for child in _named(node):
            if child.type != "type_parameter":
                continue
            constraint = child.child_by_field_name("constraint")
            default = child.child_by_field_name("value")
            params.append(
                TypeParameter(
                    text=self.text(child),
                    name=self.text(child.child_by_field_name("name")),
                    constraint=self.type_node(_named(constraint)[0]) if constraint is not None else None,
                    default=self.type_node(_named(default)[0]) if default is not None else None,
                )
            )
        return tuple(params)

    def parameters(self, node: Any | None) -> tuple[Parameter, ...]:
        if node is None:
            return ()
        return tuple(
            self.parameter(child)
            for child in _named(node)
            if child.type in ("required_parameter", "optional_parameter")
        )

    def parameter(self, node: Any) -> Parameter:
        pattern = node.child_by_field_name("pattern") or _named(node)[0]
        rest = pattern.type == "rest_pattern"
        if rest:
            pattern = _named(pattern)[0]

        name: str | BindingPattern
        if pattern.type in ("object_pattern", "array_pattern"):
            name = BindingPattern(text=self.text(pattern), elements=tuple(self.binding_elements(pattern)))
        else:
            name = self.text(pattern)

        return Parameter(
            text=self.text(node),
            name=name,
            type=self.annotation(node.child_by_field_name("type")),
            question_token=node.type == "optional_parameter",
            dot_dot_dot_token=rest,
        )

    def binding_elements(self, node: Any) -> list[BindingElement]:
        if node.type in ("identifier", "shorthand_property_identifier_pattern"):
            return [BindingElement(text=self.text(node), name=self.text(node))]
        if node.type in ("object_pattern", "array_pattern"):
            elements: list[BindingElement] = []
            for child in _named(node):
                elements.extend(self.binding_elements(child))
            return elements
        if node.type == "pair_pattern":
            return self.binding_elements(node.child_by_field_name("value"))
        if node.type in ("assignment_pattern", "object_assignment_pattern"):
            return self.binding_elements(node.child_by_field_name("left"))
        if node.type == "rest_pattern":
            return self.binding_elements(_named(node)[0])
        return []

    # --- Types ---

    def annotation(self, node: Any | None) -> TypeNode | None:
        """The type inside a ``: T`` annotation."""
        if node is None:
            return None
        inner = _named(node)
        return self.type_node(inner[0]) if inner else None

    def type_node(self, node: Any) -> TypeNode:
        kind = node.type
        text = self.text(node)

        if kind == "predefined_type":
            if text in KEYWORD_TYPES:
                return KeywordType(text=text, keyword=text)
            return TypeNode(text=text)

        if kind == "literal_type":
            return self.literal(node)

        if kind in ("type_identifier", "nested_type_identifier"):
            return TypeReference(text=text, type_name="".join(text.split()))

        if kind == "generic_type":
            name = self.text(node.child_by_field_name("name"))
            arguments = node.child_by_field_name("type_arguments")
            return TypeReference(
                text=text,
                type_name="".join(name.split()),
                type_arguments=tuple(self.type_node(a) for a in _named(arguments)),
            )

        if kind == "object_type":
            return TypeLiteral(text=text, members=self.members(node))

        if kind == "function_type":
            return FunctionType(
                text=text,
                type_parameters=self.type_parameters(node.child_by_field_name("type_parameters")),
                parameters=self.parameters(node.child_by_field_name("parameters")),
                type=self.type_node(node.child_by_field_name("return_type")),
            )

        if kind in ("union_type", "intersection_type"):
            types = tuple(self.type_node(t) for t in self._flatten(node, kind))
            if len(types) == 1:
                return types[0]
            if kind == "union_type":
                return UnionType(text=text, types=types)
            return IntersectionType(text=text, types=types)

        if kind == "parenthesized_type":
            return ParenthesizedType(text=text, type=self.type_node(_named(node)[0]))

        if kind == "array_type":
            return ArrayType(text=text, element_type=self.type_node(_named(node)[0]))

        if kind == "tuple_type":
            return TupleType(text=text, elements=tuple(self.tuple_element(e) for e in _named(node)))

        if kind in TYPE_OPERATORS:
            return TypeOperator(text=text, operator=TYPE_OPERATORS[kind], type=self.type_node(_named(node)[0]))

        if kind == "type_query":
            return TypeQuery(text=text, expr_name="".join(self.text(_named(node)[0]).split()))

        if kind == "lookup_type":
            object_type, index_type = _named(node)[:2]
            return IndexedAccessType(
                text=text,
                object_type=self.type_node(object_type),
                index_type=self.type_node(index_type),
            )

        if kind == "conditional_type":
            return ConditionalType(
                text=text,
                check_type=self.type_node(node.child_by_field_name("left")),
                extends_type=self.type_node(node.child_by_field_name("right")),
                true_type=self.type_node(node.child_by_field_name("consequence")),
                false_type=self.type_node(node.child_by_field_name("alternative")),
            )

        # infer, this, template literal and constructor types
        return TypeNode(text=text)

    def _flatten(self, node: Any, kind: str) -> list[Any]:
        # The grammar nests 'A | B | C' left-recursively, with an optional leading '|'.
        parts: list[Any] = []
        for child in _named(node):
            if child.type == kind:
                parts.extend(self._flatten(child, kind))
            else:
                parts.append(child)
        return parts

    def tuple_element(self, node: Any) -> TypeNode:
        if node.type in ("tuple_parameter", "optional_tuple_parameter"):
            return self.annotation(node.child_by_field_name("type")) or TypeNode(text=self.text(node))
        return self.type_node(node)

    def literal(self, node: Any) -> TypeNode:
        text = self.text(node)
        children = _named(node)
        if not children:
            return TypeNode(text=text)
        value = children[0]
        if value.type == "string":
            return LiteralType(text=text, literal=self.string_value(value))
        if value.type in ("true", "false"):
            return LiteralType(text=text, literal=value.type == "true")
        if value.type in ("null", "undefined"):
            return KeywordType(text=text, keyword=value.type)
        return LiteralType(text=text, literal=_number_value(text))

    def string_value(self, node: Any) -> str:
        parts: list[str] = []
        for child in node.named_children:
            if child.type == "escape_sequence":
                parts.append(_unescape(self.text(child)))
            else:
                parts.append(self.text(child))
        return "".join(parts)
