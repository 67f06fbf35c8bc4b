"""Layered resolution of settings from the command line, environment and config file."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class Configurable(ABC):
    """A setting taken from the command line, the environment, the config file or a default.

    The first source that yields something other than None wins, in this order:
    command line, environment, configuration file, default.
    """

    @classmethod
    def configure_from(cls, cli: Any, config: Any) -> Any:
        """Resolve the setting from the given sources."""
        value = cls.from_cli(cli)
        if value is None:
            value = cls.from_environment()
        if value is None:
            value = cls.from_config(config)
        if value is None:
            value = cls.default()
        return value

    @classmethod
    @abstractmethod
    def from_cli(cls, cli: Any) -> Optional[Any]:
        """Return the value given on the command line, or None."""

    @classmethod
    @abstractmethod
    def from_config(cls, config: Any) -> Optional[Any]:
        """Return the value given in the configuration file, or None."""

    @classmethod
    def from_environment(cls) -> Optional[Any]:
        """Return the value given by environment variables, or None."""
        return None

    @classmethod
    def default(cls) -> Any:
        """Return the value used when no source provides one."""
        return cls()