"""Typed, schema-aware access to the `[notitlebar]` section."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import logging

    from .validation import ConfigItems

__all__ = ["BOOL_STRINGS", "Configuration", "coerce_to_bool"]

ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a loosely typed value to a boolean.

    None gives `default`, blank or falsy strings ("false", "no", "off", "0",
    "disabled") give False, any other string gives True.
    """
    if value is None:
        return default
    if isinstance(value, str):
        return bool(value.strip()) and value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """A configuration section, falling back to the schema defaults."""

    def __init__(self, *args: Any, logger: logging.Logger, schema: ConfigItems | None = None, **kwargs: Any) -> None:  # noqa: ANN401
        super().__init__(*args, **kwargs)
        self.log = logger
        self._defaults: dict[str, ConfigValueType] = {}
        if schema:
            self._defaults = {field.name: field.default for field in schema if field.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        if name in self:
            return dict.get(self, name)  # type: ignore[no-any-return]
        return self._defaults.get(name, default)

    def get_bool(self, name: str, default: bool = False) -> bool:
        return coerce_to_bool(self.get(name), default)

    def get_str(self, name: str, default: str = "") -> str:
        value = self.get(name)
        return default if value is None else str(value)

    def get_list(self, name: str) -> list[str]:
        """Get a list of strings, accepting a single string as a one item list."""
        value = self.get(name)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            self.log.warning("Invalid list value for %s: %s", name, value)
            return []
        return [str(item) for item in value]
