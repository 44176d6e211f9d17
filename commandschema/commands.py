"""Command extractor: builds command IR from a component's type declaration.

For each requested command name the pipeline runs four stages:

1. Member resolution: find the member and normalize method-style and
   callable-property declarations into one ``ResolvedSignature``.
2. Shape validation: void return, at least one parameter, and a ref type as
   the first parameter.
3. Parameter mapping: every parameter after the ref becomes a String,
   Boolean or Int32 ``ParamShape``.
4. Assembly: one ``CommandTypeShape`` per command, in request order.

Each stage returns either its result or a ``CommandError``. The first error
ends extraction; no partial command list is ever produced. All syntax and
type questions go through the ``TypeOracle``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence, Union

from commandschema import errors
from commandschema.config import ExtractionOptions, RefPolicy
from commandschema.errors import CommandError, CommandExtractionError
from commandschema.ir.models import CommandTypeShape, ParamKind, ParamShape
from commandschema.oracle import (
    DeclarationKind,
    ParameterSymbol,
    SemanticType,
    SyntaxNode,
    TypeOracle,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandRequest:
    """A component type node and the command names to extract from it, in order."""

    type_node: SyntaxNode
    supported_commands: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedSignature:
    """A command member normalized across declaration styles."""

    kind: DeclarationKind
    declaration: SyntaxNode
    optional: bool
    return_type: SemanticType
    parameters: tuple[ParameterSymbol, ...]


@dataclass
class ExtractionResult:
    """Outcome of one extraction call: all commands, or the first error."""

    commands: list[CommandTypeShape] = field(default_factory=list)
    error: CommandError | None = None

    @property
    def passed(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[CommandTypeShape]:
        if self.error is not None:
            raise CommandExtractionError(self.error)
        return self.commands

    def summary(self) -> str:
        if self.error is not None:
            return f"[FAIL] {self.error.kind.value}: {self.error.message}"
        return f"[PASS] {len(self.commands)} command(s)"


def extract_commands(
    request: CommandRequest,
    oracle: TypeOracle,
    options: ExtractionOptions | None = None,
) -> ExtractionResult:
    """Extract validated command shapes for every requested command name.

    Args:
        request: The component type node and the ordered command names.
        oracle: Type resolution over the already-loaded declarations.
        options: Ref policy and type naming; defaults when omitted.

    Returns:
        ExtractionResult holding either one CommandTypeShape per requested
        name, in request order, or the first CommandError encountered.
    """
    options = options or ExtractionOptions()
    component_type = oracle.resolve_type(request.type_node)
    type_text = oracle.get_type_text(request.type_node)

    commands: list[CommandTypeShape] = []
    for command_name in request.supported_commands:
        resolved = resolve_member(oracle, component_type, command_name, type_text)
        if isinstance(resolved, CommandError):
            return _fail(resolved)

        invalid = validate_shape(oracle, resolved, command_name, type_text, options)
        if invalid is not None:
            return _fail(invalid)

        params = map_parameters(oracle, resolved.parameters[1:], command_name, type_text)
        if isinstance(params, CommandError):
            return _fail(params)

        command = assemble_command(command_name, resolved.optional, params)
        logger.debug(
            "Resolved command %s (%s) with %d parameter(s)",
            command_name,
            resolved.kind.value,
            command.arity,
        )
        commands.append(command)

    return ExtractionResult(commands=commands)


def parse_commands(
    request: CommandRequest,
    oracle: TypeOracle,
    options: ExtractionOptions | None = None,
) -> list[CommandTypeShape]:
    """Like ``extract_commands`` but raises ``CommandExtractionError`` on failure."""
    return extract_commands(request, oracle, options).unwrap()


def _fail(error: CommandError) -> ExtractionResult:
    logger.debug("Command extraction failed: %s", error.message)
    return ExtractionResult(error=error)


# --- Member resolution ---


def resolve_member(
    oracle: TypeOracle,
    component_type: SemanticType,
    command_name: str,
    type_text: str,
) -> Union[ResolvedSignature, CommandError]:
    """Locate a command member and normalize its signature."""
    member = oracle.get_member(component_type, command_name)
    if member is None:
        return errors.member_not_found(command_name, type_text)

    declarations = oracle.get_declarations(member)
    if len(declarations) != 1:
        return errors.ambiguous_declaration(command_name, type_text, len(declarations))

    decl = declarations[0]
    kind = oracle.get_declaration_kind(decl)
    if kind == DeclarationKind.METHOD:
        signature = oracle.get_declaration_signature(decl)
        if signature.is_generic:
            return errors.generic_not_allowed(command_name, type_text)

    elif kind == DeclarationKind.PROPERTY:
        signatures = oracle.get_call_signatures(oracle.get_declared_type(decl))
        if len(signatures) != 1:
            return errors.not_a_function(command_name, type_text)
        signature = signatures[0]
        if signature.is_generic:
            return errors.generic_not_allowed(command_name, type_text)

        for param in oracle.get_parameters(signature):
            if len(param.declarations) != 1 or not oracle.is_parameter(param.declarations[0]):
                return errors.malformed_parameter(command_name, type_text, param.name)

    else:
        return errors.not_a_function(command_name, type_text)

    return ResolvedSignature(
        kind=kind,
        declaration=decl,
        optional=oracle.is_optional(decl),
        return_type=oracle.get_return_type(signature),
        parameters=tuple(oracle.get_parameters(signature)),
    )


# --- Shape validation ---


def validate_shape(
    oracle: TypeOracle,
    resolved: ResolvedSignature,
    command_name: str,
    type_text: str,
    options: ExtractionOptions,
) -> CommandError | None:
    """Check the command contract; returns the violation, or None."""
    if not oracle.is_void_like(resolved.return_type):
        return errors.non_void_return(command_name, type_text)

    if not resolved.parameters:
        return errors.missing_ref_parameter(command_name, type_text)

    ref_param = resolved.parameters[0]
    ref_node = ref_param.type_node
    ref_text = oracle.get_type_text(ref_node)
    if oracle.get_reference_name(ref_node) is None:
        return errors.invalid_ref_parameter(command_name, type_text, ref_param.name, ref_text)

    if not is_view_ref(oracle, ref_node, options.ref_type_names):
        if options.ref_policy == RefPolicy.STRICT:
            return errors.invalid_ref_parameter(command_name, type_text, ref_param.name, ref_text)
        logger.warning(
            "First parameter %s of command %s in type %s is %s, not a ref to a named view",
            ref_param.name,
            command_name,
            type_text,
            ref_text,
        )

    return None


def is_view_ref(oracle: TypeOracle, node: SyntaxNode, ref_type_names: Sequence[str]) -> bool:
    """True for a ref wrapper with a single string-literal view name, e.g. Ref<'MyView'>."""
    arguments = oracle.get_type_arguments(node)
    return (
        oracle.get_reference_name(node) in ref_type_names
        and len(arguments) == 1
        and oracle.is_string_literal(arguments[0])
    )


# --- Parameter mapping ---


def map_parameters(
    oracle: TypeOracle,
    parameters: Sequence[ParameterSymbol],
    command_name: str,
    type_text: str,
) -> Union[list[ParamShape], CommandError]:
    """Classify each exposed parameter as String, Boolean or Int32."""
    shapes: list[ParamShape] = []
    for param in parameters:
        kind = classify_type(oracle, oracle.resolve_type(param.type_node))
        if kind is None:
            return errors.unsupported_param_type(
                command_name, type_text, param.name, oracle.get_type_text(param.type_node)
            )
        shapes.append(ParamShape(name=param.name, kind=kind))
    return shapes


def classify_type(oracle: TypeOracle, semantic_type: SemanticType) -> ParamKind | None:
    """Map a resolved type to its parameter kind; checked in this fixed order."""
    if oracle.is_string_like(semantic_type):
        return ParamKind.STRING
    if oracle.is_boolean_like(semantic_type):
        return ParamKind.BOOLEAN
    if oracle.is_int32_like(semantic_type):
        return ParamKind.INT32
    return None


# --- Assembly ---


def assemble_command(
    command_name: str, optional: bool, parameters: Sequence[ParamShape]
) -> CommandTypeShape:
    return CommandTypeShape(name=command_name, optional=optional, parameters=tuple(parameters))
