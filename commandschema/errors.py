"""Error taxonomy for command extraction.

Every failure is fatal to the extraction call that produced it. Failures are
data-carrying ``CommandError`` values returned by each pipeline stage; callers
that prefer exceptions get ``CommandExtractionError`` from ``parse_commands``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    MEMBER_NOT_FOUND = "member_not_found"
    NOT_A_FUNCTION = "not_a_function"
    AMBIGUOUS_DECLARATION = "ambiguous_declaration"
    GENERIC_NOT_ALLOWED = "generic_not_allowed"
    MALFORMED_PARAMETER = "malformed_parameter"
    NON_VOID_RETURN = "non_void_return"
    MISSING_REF_PARAMETER = "missing_ref_parameter"
    INVALID_REF_PARAMETER = "invalid_ref_parameter"
    UNSUPPORTED_PARAM_TYPE = "unsupported_param_type"


@dataclass(frozen=True)
class CommandError:
    """A single extraction failure, locatable from its message alone."""

    kind: ErrorKind
    command: str
    type_text: str  # Source text of the owning type declaration
    message: str
    parameter: str = ""
    parameter_type: str = ""

    def __str__(self) -> str:
        return self.message


class CommandExtractionError(Exception):
    """Raised by ``parse_commands`` when any command fails validation."""

    def __init__(self, error: CommandError):
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


# --- Constructors, one per failure kind ---


def member_not_found(command: str, type_text: str) -> CommandError:
    return CommandError(
        kind=ErrorKind.MEMBER_NOT_FOUND,
        command=command,
        type_text=type_text,
        message=f"Unable to find command {command} in type {type_text}.",
    )


def not_a_function(command: str, type_text: str) -> CommandError:
    return CommandError(
        kind=ErrorKind.NOT_A_FUNCTION,
        command=command,
        type_text=type_text,
        message=f"Command {command} in type {type_text} should be a function.",
    )


def ambiguous_declaration(command: str, type_text: str, count: int) -> CommandError:
    return CommandError(
        kind=ErrorKind.AMBIGUOUS_DECLARATION,
        command=command,
        type_text=type_text,
        message=(
            f"Command {command} in type {type_text} should be a function "
            f"with exactly one declaration, found {count}."
        ),
    )


def generic_not_allowed(command: str, type_text: str) -> CommandError:
    return CommandError(
        kind=ErrorKind.GENERIC_NOT_ALLOWED,
        command=command,
        type_text=type_text,
        message=f"Command {command} in type {type_text} should not be generic.",
    )


def malformed_parameter(command: str, type_text: str, parameter: str) -> CommandError:
    return CommandError(
        kind=ErrorKind.MALFORMED_PARAMETER,
        command=command,
        type_text=type_text,
        parameter=parameter,
        message=(
            f"Parameter {parameter} in command {command} in type {type_text} "
            f"should be a parameter."
        ),
    )


def non_void_return(command: str, type_text: str) -> CommandError:
    return CommandError(
        kind=ErrorKind.NON_VOID_RETURN,
        command=command,
        type_text=type_text,
        message=f"Command {command} in type {type_text} should return void.",
    )


def missing_ref_parameter(command: str, type_text: str) -> CommandError:
    return CommandError(
        kind=ErrorKind.MISSING_REF_PARAMETER,
        command=command,
        type_text=type_text,
        message=f"Command {command} in type {type_text} should have at least one parameter.",
    )


def invalid_ref_parameter(
    command: str, type_text: str, parameter: str, parameter_type: str
) -> CommandError:
    return CommandError(
        kind=ErrorKind.INVALID_REF_PARAMETER,
        command=command,
        type_text=type_text,
        parameter=parameter,
        parameter_type=parameter_type,
        message=(
            f"The first parameter in command {command} in type {type_text} "
            f"should be React.Ref<'NAME'>, instead of {parameter_type}."
        ),
    )


def unsupported_param_type(
    command: str, type_text: str, parameter: str, parameter_type: str
) -> CommandError:
    return CommandError(
        kind=ErrorKind.UNSUPPORTED_PARAM_TYPE,
        command=command,
        type_text=type_text,
        parameter=parameter,
        parameter_type=parameter_type,
        message=(
            f"Parameter {parameter} in command {command} in type {type_text} "
            f"should be either string, boolean or Int32, instead of {parameter_type}."
        ),
    )
