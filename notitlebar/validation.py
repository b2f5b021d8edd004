"""Declarative schema of the `[notitlebar]` section and its validator.

The schema gives the defaults used by `Settings`, the descriptions shown by
the quickstart wizard and the checks run by `notitlebar validate`.
"""

import difflib
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .config import BOOL_STRINGS

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
]

# expected type -> (accepts, how to write it)
TYPE_RULES: dict[type, tuple[Callable[[Any], bool], str]] = {
    bool: (lambda v: isinstance(v, bool) or (isinstance(v, str) and v.lower() in BOOL_STRINGS), "{name} = true"),
    str: (lambda v: isinstance(v, str), '{name} = "value"'),
    list: (lambda v: isinstance(v, list), '{name} = ["pattern", "other*"]'),
}


@dataclass
class ConfigField:
    """One option of the configuration section.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, bool, list)
        default: Value used when the key is missing
        description: Human-readable description, also used by the quickstart wizard
        choices: Valid values for enum-like fields, compared case-insensitively
        validator: Extra check returning a list of error messages
    """

    name: str
    field_type: type = str
    default: Any = None
    description: str = ""
    choices: list | None = None
    validator: Callable[[Any], list[str]] | None = None


class ConfigItems(list):
    """The ordered fields of a section, with lookup by name."""

    def __init__(self, *fields: ConfigField) -> None:
        super().__init__(fields)
        self._by_name = {field.name: field for field in fields}

    def get(self, name: str) -> ConfigField | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [field.name for field in self]


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    return matches[0] if matches else None


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message, optionally followed by a hint."""
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Check a section against its schema.

    Nothing here is fatal: the daemon logs the messages and falls back to the
    schema defaults for the broken values.
    """

    def __init__(self, config: Mapping[str, Any], section: str, logger: logging.Logger) -> None:
        self.config = config
        self.section = section
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Return the type, choice and custom validator errors."""
        errors = []
        for field_def in schema:
            if field_def.name not in self.config:
                continue
            value = self.config[field_def.name]

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
                continue

            if field_def.choices is not None and self._normalize(value) not in field_def.choices:
                choices_str = ", ".join(repr(c) for c in field_def.choices)
                errors.append(format_config_error(self.section, field_def.name, f"Invalid value {value!r}", f"Valid options: {choices_str}"))
            if field_def.validator:
                errors.extend(format_config_error(self.section, field_def.name, error) for error in field_def.validator(value))
        return errors

    @staticmethod
    def _normalize(value: Any) -> Any:  # noqa: ANN401
        return value.lower() if isinstance(value, str) else value

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        rule = TYPE_RULES.get(field_def.field_type)
        if rule is None:
            return None
        accepts, example = rule
        if accepts(value):
            return None
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected {field_def.field_type.__name__}, got {type(value).__name__}",
            "Use " + example.format(name=field_def.name),
        )

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log and return a warning for each key the schema does not know."""
        warnings = []
        known_keys = schema.names()
        for key in self.config:
            if key in known_keys:
                continue
            similar = _find_similar_key(key, known_keys)
            if similar:
                msg = f"[{self.section}] Unknown option '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.section}] Unknown option '{key}' - will be ignored"
            self.log.warning(msg)
            warnings.append(msg)
        return warnings
