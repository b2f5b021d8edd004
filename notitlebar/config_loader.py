"""Configuration file loading utilities.

Loads and merges TOML configuration files, asynchronously.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiofiles
import aiofiles.os

from .constants import CONFIG_FILE, CONFIG_SECTION
from .models import ConfigError

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader", "merge"]


def merge(merged: dict[str, Any], obj2: dict[str, Any], replace: bool = False) -> dict[str, Any]:
    """Merge the content of obj2 into merged.

    Args:
        merged: Dictionary to merge into
        obj2: Dictionary to merge from
        replace: If True, lists are replaced instead of concatenated

    Eg:
        merge({"a": {"b": 1}}, {"a": {"c": 2}}) == {"a": {"b": 1, "c": 2}}
    """
    for key, value in obj2.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merge(merged[key], value, replace)
        elif not replace and key in merged and isinstance(merged[key], list) and isinstance(value, list):
            merged[key] = merged[key] + value
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Handles loading and merging configuration files.

    Supports:
    - a single TOML file
    - a directory (every .toml file merged, sorted by name)
    - `include` directives inside the [notitlebar] section
    """

    def __init__(self, log: logging.Logger) -> None:
        self.log = log

    async def load(self, config_filename: str = "") -> dict[str, Any]:
        """Load the configuration and return the [notitlebar] section.

        A missing default config file is not an error: defaults apply.

        Raises:
            ConfigError: explicit file missing or TOML syntax error
        """
        if config_filename:
            config = await self._open_config(Path(os.path.expandvars(config_filename)).expanduser())
        elif await aiofiles.os.path.exists(CONFIG_FILE):
            config = await self._open_config(CONFIG_FILE)
        else:
            self.log.info("No config file at %s, using defaults", CONFIG_FILE)
            config = {}
        section = config.get(CONFIG_SECTION, {})
        section.pop("include", None)
        return section

    async def _open_config(self, fname: Path) -> dict[str, Any]:
        if await aiofiles.os.path.isdir(fname):
            config: dict[str, Any] = {}
            for toml_file in sorted(await aiofiles.os.listdir(fname)):
                if toml_file.endswith(".toml"):
                    merge(config, await self._load_config_file(fname / toml_file))
            return config

        config = await self._load_config_file(fname)
        for extra_config in list(config.get(CONFIG_SECTION, {}).get("include", [])):
            merge(config, await self._open_config(Path(os.path.expandvars(extra_config)).expanduser()))
        return config

    async def _load_config_file(self, fname: Path) -> dict[str, Any]:
        if not await aiofiles.os.path.exists(fname):
            self.log.critical("Config file not found! Please create %s", fname)
            raise ConfigError
        self.log.info("Loading %s", fname)
        async with aiofiles.open(fname, "rb") as f:
            content = await f.read()
        try:
            return tomllib.loads(content.decode())
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            self.log.critical("Problem reading %s: %s", fname, e)
            raise ConfigError from e
