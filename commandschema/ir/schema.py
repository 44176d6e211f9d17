"""JSON Schema for the command list the extractor emits.

Emitters and external tools can export this and validate extractor output
with any JSON Schema validator.
"""

from commandschema.ir import SCHEMA_VERSION
from commandschema.ir.models import FUNCTION_TYPE_ANNOTATION, ParamKind

COMMANDS_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"https://commandschema.dev/schema/commands/v{SCHEMA_VERSION}",
    "title": "Component Commands",
    "description": (
        "Ordered list of native commands declared on a component, "
        "as consumed by native-code emitters."
    ),
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "optional", "typeAnnotation"],
        "additionalProperties": False,
        "properties": {
            "name": {
                "type": "string",
                "minLength": 1,
                "description": "Command member name as declared on the component type.",
            },
            "optional": {
                "type": "boolean",
                "description": "True when the member was declared optional.",
            },
            "typeAnnotation": {
                "type": "object",
                "required": ["type", "params"],
                "additionalProperties": False,
                "properties": {
                    "type": {"type": "string", "enum": [FUNCTION_TYPE_ANNOTATION]},
                    # --- Parameters (component ref excluded) ---
                    "params": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["name", "typeAnnotation"],
                            "additionalProperties": False,
                            "properties": {
                                "name": {"type": "string", "minLength": 1},
                                "typeAnnotation": {
                                    "type": "object",
                                    "required": ["type"],
                                    "additionalProperties": False,
                                    "properties": {
                                        "type": {
                                            "type": "string",
                                            "enum": [k.annotation for k in ParamKind],
                                        },
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
    },
}


def get_schema() -> dict:
    """Return the JSON Schema for extracted command lists."""
    return COMMANDS_SCHEMA
