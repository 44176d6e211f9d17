"""Extraction options and their YAML loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml


class RefPolicy(Enum):
    # Any type reference is accepted as the component ref parameter.
    REFERENCE = "reference"
    # Only a configured ref wrapper with one string-literal argument, e.g. Ref<'MyView'>.
    STRICT = "strict"


class ConfigError(ValueError):
    """Raised for unreadable or invalid extraction config files."""


DEFAULT_REF_TYPE_NAMES = ("React.Ref", "Ref")
DEFAULT_INT32_TYPE_NAMES = ("Int32",)

KNOWN_KEYS = {"ref_policy", "ref_type_names", "int32_type_names"}


@dataclass(frozen=True)
class ExtractionOptions:
    ref_policy: RefPolicy = RefPolicy.REFERENCE
    ref_type_names: tuple[str, ...] = field(default=DEFAULT_REF_TYPE_NAMES)
    int32_type_names: tuple[str, ...] = field(default=DEFAULT_INT32_TYPE_NAMES)

    @classmethod
    def from_dict(cls, data: dict) -> ExtractionOptions:
        """Build options from a parsed config mapping.

        Missing keys keep their defaults. Unknown keys are rejected so typos
        don't silently fall back to defaults.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        unknown = sorted(set(data) - KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        kwargs: dict = {}
        if "ref_policy" in data:
            try:
                kwargs["ref_policy"] = RefPolicy(data["ref_policy"])
            except ValueError:
                allowed = ", ".join(p.value for p in RefPolicy)
                raise ConfigError(
                    f"Invalid ref_policy '{data['ref_policy']}'. Must be one of: {allowed}"
                ) from None
        for key in ("ref_type_names", "int32_type_names"):
            if key in data:
                kwargs[key] = _name_list(key, data[key])
        return cls(**kwargs)


def _name_list(key: str, value) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not value or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"'{key}' must be a non-empty list of type names")
    return tuple(value)


def load_options(path: str | Path) -> ExtractionOptions:
    """Load extraction options from a YAML file.

    An empty file yields the defaults.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ExtractionOptions()
    return ExtractionOptions.from_dict(data)
