"""IR data models for component commands.

These models are the output of the command extractor and the input of the
native-code emitters. They are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ParamKind(Enum):
    STRING = "String"
    BOOLEAN = "Boolean"
    INT32 = "Int32"

    @property
    def annotation(self) -> str:
        """Codegen schema annotation name (e.g. 'Int32TypeAnnotation')."""
        return f"{self.value}TypeAnnotation"

    @classmethod
    def from_annotation(cls, annotation: str) -> ParamKind:
        for kind in cls:
            if kind.annotation == annotation:
                return kind
        raise ValueError(f"Unknown parameter type annotation: {annotation}")


FUNCTION_TYPE_ANNOTATION = "FunctionTypeAnnotation"


# --- Core IR Nodes ---


@dataclass(frozen=True)
class ParamShape:
    """A command parameter exposed to native code."""

    name: str
    kind: ParamKind

    def to_schema(self) -> dict:
        return {"name": self.name, "typeAnnotation": {"type": self.kind.annotation}}


@dataclass(frozen=True)
class CommandTypeShape:
    """A single validated command: name, optionality and typed parameters.

    The component ref parameter is never part of ``parameters``.
    """

    name: str
    optional: bool = False
    parameters: tuple[ParamShape, ...] = field(default_factory=tuple)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def to_schema(self) -> dict:
        """Render in the codegen schema form native emitters read."""
        return {
            "name": self.name,
            "optional": self.optional,
            "typeAnnotation": {
                "type": FUNCTION_TYPE_ANNOTATION,
                "params": [p.to_schema() for p in self.parameters],
            },
        }

    @classmethod
    def from_schema(cls, data: dict) -> CommandTypeShape:
        annotation = data.get("typeAnnotation", {})
        if annotation.get("type") != FUNCTION_TYPE_ANNOTATION:
            raise ValueError(
                f"Command {data.get('name')!r} must have a {FUNCTION_TYPE_ANNOTATION}"
            )
        return cls(
            name=data["name"],
            optional=bool(data.get("optional", False)),
            parameters=tuple(
                ParamShape(
                    name=p["name"],
                    kind=ParamKind.from_annotation(p["typeAnnotation"]["type"]),
                )
                for p in annotation.get("params", [])
            ),
        )


def commands_to_schema(commands: list[CommandTypeShape]) -> list[dict]:
    return [c.to_schema() for c in commands]
