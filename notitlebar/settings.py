"""User settings: schema, typed accessors and change notifications."""

from fnmatch import fnmatch
from logging import Logger
from typing import Any

from .config import Configuration
from .constants import CONFIG_SECTION
from .models import IgnoreListType
from .signals import SignalEmitter
from .validation import ConfigField, ConfigItems, ConfigValidator

__all__ = ["NOTITLEBAR_SCHEMA", "Settings"]


def _validate_patterns(value: list) -> list[str]:
    return [f"Pattern {item!r} is not a string" for item in value if not isinstance(item, str)]


NOTITLEBAR_SCHEMA = ConfigItems(
    ConfigField(
        "only_main_monitor",
        bool,
        default=False,
        description="Hide title bars of every window on the primary monitor instead of maximized windows",
    ),
    ConfigField(
        "ignore_list_type",
        str,
        default=IgnoreListType.DISABLED.value,
        description="How ignore_list is used",
        choices=[t.value for t in IgnoreListType],
    ),
    ConfigField(
        "ignore_list",
        list,
        default=[],
        description="Window class or title patterns (fnmatch syntax)",
        validator=_validate_patterns,
    ),
    ConfigField("debug", bool, default=False, description="Enable debug logging"),
)

# config key -> signal emitted when it changes
WATCHED_KEYS = {
    "only_main_monitor": "changed::only-main-monitor",
    "ignore_list": "changed::ignore-list",
    "ignore_list_type": "changed::ignore-list-type",
}


class Settings(SignalEmitter):
    """The `[notitlebar]` section, emitting `changed::*` signals on update."""

    def __init__(self, section: dict[str, Any] | None = None, *, logger: Logger) -> None:
        super().__init__()
        self.log = logger
        self.config = Configuration(section or {}, logger=logger, schema=NOTITLEBAR_SCHEMA)

    @property
    def only_main_monitor(self) -> bool:
        return self.config.get_bool("only_main_monitor")

    @property
    def ignore_list_type(self) -> IgnoreListType:
        value = self.config.get_str("ignore_list_type").lower()
        try:
            return IgnoreListType(value)
        except ValueError:
            self.log.warning("Invalid ignore_list_type %r, ignore list disabled", value)
            return IgnoreListType.DISABLED

    @property
    def ignore_list(self) -> list[str]:
        return self.config.get_list("ignore_list")

    def matches_ignore_list(self, *names: str) -> bool:
        """Tell if any of `names` matches a pattern of the ignore list (case-insensitive)."""
        patterns = [pattern.lower() for pattern in self.ignore_list]
        return any(fnmatch(name.lower(), pattern) for name in names if name for pattern in patterns)

    def update(self, section: dict[str, Any]) -> None:
        """Replace the settings, emitting a signal for each watched key that changed."""
        previous = {key: self.config.get(key) for key in WATCHED_KEYS}
        self.config = Configuration(section, logger=self.log, schema=NOTITLEBAR_SCHEMA)
        for key, signal in WATCHED_KEYS.items():
            if self.config.get(key) != previous[key]:
                self.log.debug("Setting %s changed", key)
                self.emit(signal, key)

    def validate(self) -> list[str]:
        """Return configuration errors and unknown key warnings."""
        validator = ConfigValidator(self.config, CONFIG_SECTION, self.log)
        return validator.validate(NOTITLEBAR_SCHEMA) + validator.warn_unknown_keys(NOTITLEBAR_SCHEMA)
