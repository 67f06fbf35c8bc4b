"""Reading the YAML configuration file and locating it on disk."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

import yaml

COLOR_WHEN = ("always", "auto", "never")
ICON_WHEN = ("always", "auto", "never")
ICON_THEMES = ("fancy", "unicode")
DISPLAY_MODES = ("all", "almost-all", "directory-only")
LAYOUTS = ("grid", "tree", "oneline")
SIZE_MODES = ("default", "short", "bytes")
PERMISSION_MODES = ("rwx", "octal", "attributes", "disable")
SORT_COLUMNS = ("extension", "name", "time", "size", "version", "git", "none")
DIR_GROUPINGS = ("first", "last", "none")
HYPERLINK_MODES = ("always", "auto", "never")


class ConfigError(ValueError):
    """Raised when a configuration document is not valid."""


_Parser = Callable[[Any, str], Any]


def _boolean(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key}: invalid type: expected a boolean, found {value!r}")


def _string(value: Any, key: str) -> str:
    if isinstance(value, str):
        return value
    raise ConfigError(f"{key}: invalid type: expected a string, found {value!r}")


def _count(value: Any, key: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise ConfigError(
        f"{key}: invalid value: expected a non-negative integer, found {value!r}"
    )


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list):
        raise ConfigError(f"{key}: invalid type: expected a sequence, found {value!r}")
    return [_string(item, f"{key}[{index}]") for index, item in enumerate(value)]


def _choice(*allowed: str) -> _Parser:
    def parse(value: Any, key: str) -> str:
        if isinstance(value, str) and value in allowed:
            return value
        raise ConfigError(
            f"{key}: unknown variant {value!r}, expected one of {', '.join(allowed)}"
        )

    return parse


def _build(
    cls: type,
    data: dict,
    spec: dict[str, tuple[str, _Parser]],
    prefix: str,
    strict: bool,
) -> Any:
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in spec:
            if strict:
                raise ConfigError(
                    f"unknown field `{key}`, expected one of {', '.join(spec)}"
                )
            continue
        attr, parse = spec[key]
        values[attr] = None if value is None else parse(value, f"{prefix}{key}")
    return cls(**values)


def _section(cls: type, spec: dict[str, tuple[str, _Parser]]) -> _Parser:
    def parse(value: Any, key: str) -> Any:
        if not isinstance(value, dict):
            raise ConfigError(f"{key}: invalid type: expected a mapping, found {value!r}")
        return _build(cls, value, spec, f"{key}.", strict=False)

    return parse


@dataclass
class ColorConfig:
    """The `color` section."""

    when: Optional[str] = None
    theme: Optional[str] = None


@dataclass
class IconsConfig:
    """The `icons` section."""

    when: Optional[str] = None
    theme: Optional[str] = None
    separator: Optional[str] = None


@dataclass
class RecursionConfig:
    """The `recursion` section."""

    enabled: Optional[bool] = None
    depth: Optional[int] = None


@dataclass
class SortingConfig:
    """The `sorting` section."""

    column: Optional[str] = None
    reverse: Optional[bool] = None
    dir_grouping: Optional[str] = None


@dataclass
class TruncateOwnerConfig:
    """The `truncate-owner` section."""

    after: Optional[int] = None
    marker: Optional[str] = None


_COLOR_SPEC = {
    "when": ("when", _choice(*COLOR_WHEN)),
    "theme": ("theme", _string),
}
_ICONS_SPEC = {
    "when": ("when", _choice(*ICON_WHEN)),
    "theme": ("theme", _choice(*ICON_THEMES)),
    "separator": ("separator", _string),
}
_RECURSION_SPEC = {
    "enabled": ("enabled", _boolean),
    "depth": ("depth", _count),
}
_SORTING_SPEC = {
    "column": ("column", _choice(*SORT_COLUMNS)),
    "reverse": ("reverse", _boolean),
    "dir-grouping": ("dir_grouping", _choice(*DIR_GROUPINGS)),
}
_TRUNCATE_OWNER_SPEC = {
    "after": ("after", _count),
    "marker": ("marker", _string),
}

_CONFIG_SPEC: dict[str, tuple[str, _Parser]] = {
    "classic": ("classic", _boolean),
    "blocks": ("blocks", _string_list),
    "color": ("color", _section(ColorConfig, _COLOR_SPEC)),
    "date": ("date", _string),
    "dereference": ("dereference", _boolean),
    "display": ("display", _choice(*DISPLAY_MODES)),
    "icons": ("icons", _section(IconsConfig, _ICONS_SPEC)),
    "ignore-globs": ("ignore_globs", _string_list),
    "indicators": ("indicators", _boolean),
    "layout": ("layout", _choice(*LAYOUTS)),
    "recursion": ("recursion", _section(RecursionConfig, _RECURSION_SPEC)),
    "size": ("size", _choice(*SIZE_MODES)),
    "permission": ("permission", _choice(*PERMISSION_MODES)),
    "sorting": ("sorting", _section(SortingConfig, _SORTING_SPEC)),
    "no-symlink": ("no_symlink", _boolean),
    "total-size": ("total_size", _boolean),
    "symlink-arrow": ("symlink_arrow", _string),
    "hyperlink": ("hyperlink", _choice(*HYPERLINK_MODES)),
    "header": ("header", _boolean),
    "literal": ("literal", _boolean),
    "truncate-owner": (
        "truncate_owner",
        _section(TruncateOwnerConfig, _TRUNCATE_OWNER_SPEC),
    ),
}


def _home_dir() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def expand_home(path: Union[str, os.PathLike]) -> Optional[Path]:
    """Expand a leading `~` component to the home directory.

    Returns the path unchanged when it does not start with `~`, and None
    when the home directory cannot be determined.
    """
    p = Path(path)
    parts = p.parts
    if not parts or parts[0] != "~":
        return p
    home = _home_dir()
    if home is None:
        return None
    if len(parts) == 1:
        return home
    if home == Path("/"):
        # The home directory is the root: just drop the tilde.
        return Path(*parts[1:])
    return home.joinpath(*parts[1:])


def _config_dir() -> Optional[Path]:
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    home = _home_dir()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" if home else None
    return _xdg_config_home()


def _xdg_config_home() -> Optional[Path]:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    home = _home_dir()
    return home / ".config" if home else None


def config_paths() -> Iterator[Path]:
    """Yield the directories searched for configuration, in order of preference."""
    home = _home_dir()
    candidates = [home / ".config" if home else None, _config_dir()]
    if sys.platform != "win32":
        candidates.append(_xdg_config_home())
    paths = [candidate / "lsd" for candidate in candidates if candidate is not None]
    return iter(paths)


@dataclass
class Config:
    """Settings read from a configuration file; None means not given."""

    classic: Optional[bool] = None
    blocks: Optional[list[str]] = None
    color: Optional[ColorConfig] = None
    date: Optional[str] = None
    dereference: Optional[bool] = None
    display: Optional[str] = None
    icons: Optional[IconsConfig] = None
    ignore_globs: Optional[list[str]] = None
    indicators: Optional[bool] = None
    layout: Optional[str] = None
    recursion: Optional[RecursionConfig] = None
    size: Optional[str] = None
    permission: Optional[str] = None
    sorting: Optional[SortingConfig] = None
    no_symlink: Optional[bool] = None
    total_size: Optional[bool] = None
    symlink_arrow: Optional[str] = None
    hyperlink: Optional[str] = None
    header: Optional[bool] = None
    literal: Optional[bool] = None
    truncate_owner: Optional[TruncateOwnerConfig] = None

    @classmethod
    def from_yaml(cls, text: str) -> "Config":
        """Parse a YAML document; raise ConfigError if it is not valid."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as err:
            raise ConfigError(str(err)) from err
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"invalid type: expected a mapping, found {data!r}")
        return _build(cls, data, _CONFIG_SPEC, "", strict=True)

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> Optional["Config"]:
        """Read a configuration file, reporting problems on stderr.

        Returns None when the file is missing, unreadable or malformed.
        """
        path = Path(path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as err:
            print(f"Can not open config file {path}: {err}.", file=sys.stderr)
            return None
        try:
            return cls.from_yaml(raw.decode("utf-8", errors="replace"))
        except ConfigError as err:
            print(f"Configuration file {path} format error, {err}.", file=sys.stderr)
            return None

    @classmethod
    def builtin(cls) -> "Config":
        """Return the built-in default configuration."""
        return cls.from_yaml(DEFAULT_CONFIG)

    @classmethod
    def load_default(cls) -> "Config":
        """Load the first valid config.yaml or config.yml found, else the built-in one."""
        for directory in config_paths():
            yaml_file = directory / "config.yaml"
            yml_file = directory / "config.yml"
            if yaml_file.is_file():
                found = cls.from_file(yaml_file)
            elif yml_file.is_file():
                found = cls.from_file(yml_file)
            else:
                found = None
            if found is not None:
                return found
        return cls.builtin()

    def field_names(self) -> list[str]:
        """Return the names of all settings."""
        return [item.name for item in fields(self)]


DEFAULT_CONFIG = """---
# Shorthand that makes the output resemble classic `ls`.
classic: false

# Columns shown, in order, for the long and tree layouts.
# Possible values: permission, user, group, context, size, date, name, inode, git
blocks:
  - permission
  - user
  - group
  - size
  - date
  - name

color:
  # Possible values: never, auto, always
  when: auto
  # Possible values: default, no-color, no-lscolors, <theme-file-name>
  theme: default

# Possible values: date, locale, relative, +<date_format>
# date: date

# Whether to dereference symbolic links.
dereference: false

# Possible values: all, almost-all, directory-only
# display: all

icons:
  # Possible values: always, auto, never
  when: auto
  # Possible values: fancy, unicode
  theme: fancy
  # The string between the icon and the name.
  separator: " "

# Globs of names to leave out of listings.
# ignore-globs:
#   - .git

# Whether to append indicator characters to names.
indicators: false

# Possible values: grid, tree, oneline
layout: grid

recursion:
  enabled: false
  # depth: 3

# Possible values: default, short, bytes
size: default

# Possible values: rwx, octal, attributes, disable
# permission: rwx

sorting:
  # Possible values: extension, name, time, size, version
  column: name
  reverse: false
  # Possible values: first, last, none
  dir-grouping: none

# Whether to omit symlink targets.
no-symlink: false

# Whether to show the total size of directories.
total-size: false

# Possible values: always, auto, never
hyperlink: never

# The arrow shown between a symlink and its target.
symlink-arrow: \u21d2

# Whether to print names without quoting.
literal: false

truncate-owner:
  # Number of characters to keep; empty means no truncation.
  after:
  # Appended to a truncated name.
  marker: ""
"""