"""Colour themes, LS_COLORS handling and styling of output text."""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from operator import attrgetter
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import yaml

from lsd.config import config_paths

_NAMED_COLORS = {
    "black": 0,
    "dark_red": 1,
    "dark_green": 2,
    "dark_yellow": 3,
    "dark_blue": 4,
    "dark_magenta": 5,
    "dark_cyan": 6,
    "grey": 7,
    "dark_grey": 8,
    "red": 9,
    "green": 10,
    "yellow": 11,
    "blue": 12,
    "magenta": 13,
    "cyan": 14,
    "white": 15,
}


@dataclass(frozen=True)
class Color:
    """A terminal colour: a named colour, a 256-colour index or an RGB triple."""

    name: Optional[str] = None
    ansi: Optional[int] = None
    rgb: Optional[tuple[int, int, int]] = None

    def __post_init__(self) -> None:
        given = sum(value is not None for value in (self.name, self.ansi, self.rgb))
        if given != 1:
            raise ValueError("a colour needs exactly one of name, ansi or rgb")
        if self.name is not None and self.name not in _NAMED_COLORS:
            raise ValueError(f"unknown colour name: {self.name!r}")
        if self.ansi is not None and not 0 <= self.ansi <= 255:
            raise ValueError(f"colour index out of range: {self.ansi}")
        if self.rgb is not None and not all(0 <= part <= 255 for part in self.rgb):
            raise ValueError(f"RGB component out of range: {self.rgb}")

    def _sgr(self, background: bool) -> str:
        prefix = "48" if background else "38"
        if self.rgb is not None:
            red, green, blue = self.rgb
            return f"{prefix};2;{red};{green};{blue}"
        index = self.ansi if self.ansi is not None else _NAMED_COLORS[self.name or ""]
        return f"{prefix};5;{index}"


def _named(name: str) -> Color:
    return Color(name=name)


def _ansi(index: int) -> Color:
    return Color(ansi=index)


class Attribute(Enum):
    """Text attributes; the value is the SGR code."""

    BOLD = 1
    DIM = 2
    ITALIC = 3
    UNDERLINED = 4
    SLOW_BLINK = 5
    RAPID_BLINK = 6
    REVERSE = 7
    HIDDEN = 8
    CROSSED_OUT = 9


@dataclass(frozen=True)
class Style:
    """Foreground, background and attributes applied to a piece of text."""

    foreground: Optional[Color] = None
    background: Optional[Color] = None
    attributes: frozenset[Attribute] = frozenset()

    def apply(self, text: str) -> str:
        """Return the text wrapped in the escape sequences of this style."""
        parts = []
        if self.background is not None:
            parts.append(f"\x1b[{self.background._sgr(True)}m")
        if self.foreground is not None:
            parts.append(f"\x1b[{self.foreground._sgr(False)}m")
        for attribute in sorted(self.attributes, key=lambda a: a.value):
            parts.append(f"\x1b[{attribute.value}m")
        parts.append(text)
        if self.attributes:
            parts.append("\x1b[0m")
        else:
            if self.background is not None:
                parts.append("\x1b[49m")
            if self.foreground is not None:
                parts.append("\x1b[39m")
        return "".join(parts)


class GitStatus(Enum):
    """The git status of a file."""

    DEFAULT = "default"
    UNMODIFIED = "unmodified"
    IGNORED = "ignored"
    NEW_IN_INDEX = "new_in_index"
    NEW_IN_WORKDIR = "new_in_workdir"
    TYPECHANGE = "typechange"
    DELETED = "deleted"
    RENAMED = "renamed"
    MODIFIED = "modified"
    CONFLICTED = "conflicted"


class ElemKind(Enum):
    """The kinds of displayed elements that carry a colour."""

    FILE = "file"
    SYMLINK = "symlink"
    BROKEN_SYMLINK = "broken_symlink"
    MISSING_SYMLINK_TARGET = "missing_symlink_target"
    DIR = "dir"
    PIPE = "pipe"
    BLOCK_DEVICE = "block_device"
    CHAR_DEVICE = "char_device"
    SOCKET = "socket"
    SPECIAL = "special"
    READ = "read"
    WRITE = "write"
    EXEC = "exec"
    EXEC_STICKY = "exec_sticky"
    NO_ACCESS = "no_access"
    OCTAL = "octal"
    ACL = "acl"
    CONTEXT = "context"
    ARCHIVE = "archive"
    ATTRIBUTE_READ = "attribute_read"
    HIDDEN = "hidden"
    SYSTEM = "system"
    DAY_OLD = "day_old"
    HOUR_OLD = "hour_old"
    WEEK_OLD = "week_old"
    MONTH_OLD = "month_old"
    OLDER = "older"
    USER = "user"
    GROUP = "group"
    NON_FILE = "non_file"
    FILE_LARGE = "file_large"
    FILE_MEDIUM = "file_medium"
    FILE_SMALL = "file_small"
    INODE = "inode"
    LINKS = "links"
    TREE_EDGE = "tree_edge"
    GIT_STATUS = "git_status"


_THEME_PATHS = {
    ElemKind.SYMLINK: attrgetter("file_type.symlink.default"),
    ElemKind.BROKEN_SYMLINK: attrgetter("file_type.symlink.broken"),
    ElemKind.MISSING_SYMLINK_TARGET: attrgetter("file_type.symlink.missing_target"),
    ElemKind.PIPE: attrgetter("file_type.pipe"),
    ElemKind.BLOCK_DEVICE: attrgetter("file_type.block_device"),
    ElemKind.CHAR_DEVICE: attrgetter("file_type.char_device"),
    ElemKind.SOCKET: attrgetter("file_type.socket"),
    ElemKind.SPECIAL: attrgetter("file_type.special"),
    ElemKind.READ: attrgetter("permission.read"),
    ElemKind.WRITE: attrgetter("permission.write"),
    ElemKind.EXEC: attrgetter("permission.exec"),
    ElemKind.EXEC_STICKY: attrgetter("permission.exec_sticky"),
    ElemKind.NO_ACCESS: attrgetter("permission.no_access"),
    ElemKind.OCTAL: attrgetter("permission.octal"),
    ElemKind.ACL: attrgetter("permission.acl"),
    ElemKind.CONTEXT: attrgetter("permission.context"),
    ElemKind.ARCHIVE: attrgetter("attributes.archive"),
    ElemKind.ATTRIBUTE_READ: attrgetter("attributes.read"),
    ElemKind.HIDDEN: attrgetter("attributes.hidden"),
    ElemKind.SYSTEM: attrgetter("attributes.system"),
    ElemKind.DAY_OLD: attrgetter("date.day_old"),
    ElemKind.HOUR_OLD: attrgetter("date.hour_old"),
    ElemKind.WEEK_OLD: attrgetter("date.week_old"),
    ElemKind.MONTH_OLD: attrgetter("date.month_old"),
    ElemKind.OLDER: attrgetter("date.older"),
    ElemKind.USER: attrgetter("user"),
    ElemKind.GROUP: attrgetter("group"),
    ElemKind.NON_FILE: attrgetter("size.none"),
    ElemKind.FILE_LARGE: attrgetter("size.large"),
    ElemKind.FILE_MEDIUM: attrgetter("size.medium"),
    ElemKind.FILE_SMALL: attrgetter("size.small"),
    ElemKind.TREE_EDGE: attrgetter("tree_edge"),
}


@dataclass(frozen=True)
class Elem:
    """A displayed element, with the details that pick its colour."""

    kind: ElemKind
    exec: bool = False
    uid: bool = False
    valid: bool = False
    status: GitStatus = GitStatus.DEFAULT

    def has_suid(self) -> bool:
        """Whether the element is a file or directory with the set-uid bit."""
        return self.kind in (ElemKind.FILE, ElemKind.DIR) and self.uid

    def get_color(self, theme: "ColorTheme") -> Color:
        """Return the colour the theme gives this element."""
        kind = self.kind
        if kind is ElemKind.FILE:
            colors = theme.file_type.file
            if self.exec:
                return colors.exec_uid if self.uid else colors.exec_no_uid
            return colors.uid_no_exec if self.uid else colors.no_exec_no_uid
        if kind is ElemKind.DIR:
            return theme.file_type.dir.uid if self.uid else theme.file_type.dir.no_uid
        if kind is ElemKind.INODE:
            return theme.inode.valid if self.valid else theme.inode.invalid
        if kind is ElemKind.LINKS:
            return theme.links.valid if self.valid else theme.links.invalid
        if kind is ElemKind.GIT_STATUS:
            return getattr(theme.git_status, self.status.value)
        return _THEME_PATHS[kind](theme)


@dataclass(frozen=True)
class FileColors:
    exec_uid: Color = _ansi(40)
    uid_no_exec: Color = _ansi(184)
    exec_no_uid: Color = _ansi(40)
    no_exec_no_uid: Color = _ansi(184)


@dataclass(frozen=True)
class DirColors:
    uid: Color = _ansi(33)
    no_uid: Color = _ansi(33)


@dataclass(frozen=True)
class SymlinkColors:
    default: Color = _ansi(44)
    broken: Color = _ansi(124)
    missing_target: Color = _ansi(124)


@dataclass(frozen=True)
class FileTypeColors:
    file: FileColors = field(default_factory=FileColors)
    dir: DirColors = field(default_factory=DirColors)
    pipe: Color = _ansi(44)
    symlink: SymlinkColors = field(default_factory=SymlinkColors)
    block_device: Color = _ansi(44)
    char_device: Color = _ansi(172)
    socket: Color = _ansi(44)
    special: Color = _ansi(44)


@dataclass(frozen=True)
class PermissionColors:
    read: Color = _named("green")
    write: Color = _named("yellow")
    exec: Color = _named("red")
    exec_sticky: Color = _named("magenta")
    no_access: Color = _ansi(245)
    octal: Color = _ansi(6)
    acl: Color = _named("dark_cyan")
    context: Color = _named("cyan")


@dataclass(frozen=True)
class AttributeColors:
    archive: Color = _named("yellow")
    read: Color = _named("green")
    hidden: Color = _named("red")
    system: Color = _named("magenta")


@dataclass(frozen=True)
class DateColors:
    hour_old: Color = _ansi(40)
    day_old: Color = _ansi(42)
    week_old: Color = _ansi(42)
    month_old: Color = _ansi(42)
    older: Color = _ansi(36)


@dataclass(frozen=True)
class SizeColors:
    none: Color = _ansi(245)
    small: Color = _ansi(229)
    medium: Color = _ansi(216)
    large: Color = _ansi(172)


@dataclass(frozen=True)
class INodeColors:
    valid: Color = _ansi(13)
    invalid: Color = _ansi(245)


@dataclass(frozen=True)
class LinksColors:
    valid: Color = _ansi(13)
    invalid: Color = _ansi(245)


@dataclass(frozen=True)
class GitStatusColors:
    default: Color = _ansi(245)
    unmodified: Color = _ansi(245)
    ignored: Color = _ansi(245)
    new_in_index: Color = _named("dark_green")
    new_in_workdir: Color = _named("dark_green")
    typechange: Color = _named("dark_yellow")
    deleted: Color = _named("dark_red")
    renamed: Color = _named("dark_green")
    modified: Color = _named("dark_yellow")
    conflicted: Color = _named("dark_red")


def _parse_color(value: Any, key: str) -> Color:
    if isinstance(value, bool):
        raise ValueError(f"{key}: invalid colour {value!r}")
    if isinstance(value, int):
        return Color(ansi=value)
    if isinstance(value, str):
        text = value.strip().lower().replace("-", "_")
        if text in _NAMED_COLORS:
            return Color(name=text)
        if text.startswith("#") and len(text) == 7:
            try:
                return Color(rgb=(int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16)))
            except ValueError:
                pass
    raise ValueError(f"{key}: invalid colour {value!r}")


def _merge(current: Any, data: Any, prefix: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"{prefix or 'theme'}: expected a mapping, found {data!r}")
    known = {item.name for item in fields(current)}
    changes = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        if key not in known:
            raise ValueError(f"unknown theme field `{prefix}{raw_key}`")
        existing = getattr(current, key)
        if is_dataclass(existing):
            changes[key] = _merge(existing, value, f"{prefix}{raw_key}.")
        else:
            changes[key] = _parse_color(value, f"{prefix}{raw_key}")
    return replace(current, **changes)


@dataclass(frozen=True)
class ColorTheme:
    """The colours of every kind of element."""

    user: Color = _ansi(230)
    group: Color = _ansi(187)
    permission: PermissionColors = field(default_factory=PermissionColors)
    attributes: AttributeColors = field(default_factory=AttributeColors)
    file_type: FileTypeColors = field(default_factory=FileTypeColors)
    date: DateColors = field(default_factory=DateColors)
    size: SizeColors = field(default_factory=SizeColors)
    inode: INodeColors = field(default_factory=INodeColors)
    links: LinksColors = field(default_factory=LinksColors)
    tree_edge: Color = _ansi(245)
    git_status: GitStatusColors = field(default_factory=GitStatusColors)

    @classmethod
    def default_dark(cls) -> "ColorTheme":
        """Return the built-in theme for dark terminals."""
        return cls()

    @classmethod
    def from_mapping(cls, data: Any) -> "ColorTheme":
        """Build a theme from a parsed YAML mapping; missing keys keep their defaults."""
        return _merge(cls.default_dark(), data, "")


class ThemeOption(Enum):
    """Which colour theme to use."""

    NO_COLOR = "no-color"
    DEFAULT = "default"
    NO_LSCOLORS = "no-lscolors"
    CUSTOM = "custom"
    CUSTOM_LEGACY = "custom-legacy"


_BASIC_COLORS = (
    "black", "dark_red", "dark_green", "dark_yellow",
    "dark_blue", "dark_magenta", "dark_cyan", "grey",
)
_BRIGHT_COLORS = (
    "dark_grey", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
)

_INDICATORS = frozenset(
    "no fi rs di ln mh pi so do bd cd or mi su sg ca tw ow st ex lc rc ec".split()
)

_DEFAULT_LS_COLORS = (
    "rs=0:di=01;34:ln=01;36:mh=00:pi=40;33:so=01;35:do=01;35:bd=40;33;01:"
    "cd=40;33;01:or=40;31;01:mi=00:su=37;41:sg=30;43:ca=00:tw=30;42:"
    "ow=34;42:st=37;44:ex=01;32"
)


def _extended_color(tokens: Iterator[str]) -> Color:
    mode = int(next(tokens))
    if mode == 5:
        return Color(ansi=int(next(tokens)))
    if mode == 2:
        return Color(rgb=(int(next(tokens)), int(next(tokens)), int(next(tokens))))
    raise ValueError(f"unknown colour mode {mode}")


def _parse_sgr(code: str) -> Optional[Style]:
    foreground: Optional[Color] = None
    background: Optional[Color] = None
    attributes: set[Attribute] = set()
    tokens = iter(code.split(";"))
    try:
        for token in tokens:
            number = int(token) if token else 0
            if number == 0:
                foreground = background = None
                attributes.clear()
            elif 1 <= number <= 9:
                attributes.add(Attribute(number))
            elif 30 <= number <= 37:
                foreground = Color(name=_BASIC_COLORS[number - 30])
            elif number == 38:
                foreground = _extended_color(tokens)
            elif number == 39:
                foreground = None
            elif 40 <= number <= 47:
                background = Color(name=_BASIC_COLORS[number - 40])
            elif number == 48:
                background = _extended_color(tokens)
            elif number == 49:
                background = None
            elif 90 <= number <= 97:
                foreground = Color(name=_BRIGHT_COLORS[number - 90])
            elif 100 <= number <= 107:
                background = Color(name=_BRIGHT_COLORS[number - 100])
    except (ValueError, StopIteration):
        return None
    return Style(foreground, background, frozenset(attributes))


class LsColors:
    """Styles read from an LS_COLORS specification."""

    def __init__(
        self, indicators: dict[str, Style], suffixes: list[tuple[str, Style]]
    ) -> None:
        self.indicators = indicators
        self.suffixes = suffixes

    @classmethod
    def parse(cls, value: str) -> "LsColors":
        """Parse an LS_COLORS string, skipping entries that are not understood."""
        indicators: dict[str, Style] = {}
        suffixes: list[tuple[str, Style]] = []
        for entry in value.split(":"):
            key, sep, code = entry.partition("=")
            if not sep or not key:
                continue
            style = _parse_sgr(code)
            if style is None:
                continue
            if key.startswith("*"):
                suffixes.append((key[1:].lower(), style))
            elif key in _INDICATORS:
                indicators[key] = style
        return cls(indicators, suffixes)

    @classmethod
    def from_env(cls) -> Optional["LsColors"]:
        """Parse the LS_COLORS environment variable, or return None if unset."""
        value = os.environ.get("LS_COLORS")
        return None if value is None else cls.parse(value)

    @classmethod
    def _builtin(cls) -> "LsColors":
        return cls.parse(_DEFAULT_LS_COLORS)

    def style_for_indicator(self, indicator: str) -> Optional[Style]:
        """Return the style of an indicator such as 'di' or 'ex', if defined."""
        style = self.indicators.get(indicator)
        if style is None and indicator == "fi":
            style = self.indicators.get("no")
        return style

    def _first_defined(self, *candidates: str) -> str:
        for candidate in candidates:
            if candidate in self.indicators:
                return candidate
        return candidates[-1]

    def _indicator_for(self, path: Path, info: Optional[os.stat_result]) -> str:
        if info is None:
            return "fi"
        mode = info.st_mode
        if stat.S_ISDIR(mode):
            sticky = bool(mode & stat.S_ISVTX)
            writable = bool(mode & stat.S_IWOTH)
            if sticky and writable:
                return self._first_defined("tw", "di")
            if writable:
                return self._first_defined("ow", "di")
            if sticky:
                return self._first_defined("st", "di")
            return "di"
        if stat.S_ISLNK(mode):
            return "ln" if path.exists() else self._first_defined("or", "ln")
        if stat.S_ISFIFO(mode):
            return "pi"
        if stat.S_ISSOCK(mode):
            return "so"
        if stat.S_ISBLK(mode):
            return "bd"
        if stat.S_ISCHR(mode):
            return "cd"
        if mode & stat.S_ISUID:
            return self._first_defined("su", "ex" if mode & 0o111 else "fi")
        if mode & stat.S_ISGID:
            return self._first_defined("sg", "ex" if mode & 0o111 else "fi")
        if mode & 0o111:
            return "ex"
        return "fi"

    def style_for_path(self, path: Union[str, os.PathLike]) -> Optional[Style]:
        """Return the style for a file, judged by its type and then its name."""
        path = Path(path)
        try:
            info: Optional[os.stat_result] = path.lstat()
        except OSError:
            info = None
        indicator = self._indicator_for(path, info)
        if indicator == "fi":
            name = path.name.lower()
            for suffix, style in reversed(self.suffixes):
                if name.endswith(suffix):
                    return style
        return self.style_for_indicator(indicator)


_ELEM_INDICATORS = {
    ElemKind.SYMLINK: "ln",
    ElemKind.PIPE: "pi",
    ElemKind.SOCKET: "so",
    ElemKind.BLOCK_DEVICE: "bd",
    ElemKind.CHAR_DEVICE: "cd",
    ElemKind.BROKEN_SYMLINK: "or",
    ElemKind.MISSING_SYMLINK_TARGET: "mi",
}

_SUID_BACKGROUND = Color(ansi=124)


def _load_theme(name: str) -> Optional[ColorTheme]:
    given = Path(name)
    bases = [given] if given.is_absolute() else [d / name for d in config_paths()]
    for base in bases:
        for suffix in (".yaml", ".yml"):
            candidate = base.with_name(base.name + suffix)
            if not candidate.is_file():
                continue
            try:
                data = yaml.safe_load(candidate.read_text(encoding="utf-8"))
                return ColorTheme.from_mapping(data or {})
            except (OSError, yaml.YAMLError, ValueError) as err:
                print(f"Bad theme file {candidate}: {err}", file=sys.stderr)
                return None
    return None


class Colors:
    """Picks the style of each displayed element."""

    def __init__(
        self, option: ThemeOption = ThemeOption.DEFAULT, theme_file: Optional[str] = None
    ) -> None:
        if option is ThemeOption.NO_COLOR:
            self.theme: Optional[ColorTheme] = None
        elif option in (ThemeOption.DEFAULT, ThemeOption.NO_LSCOLORS):
            self.theme = ColorTheme.default_dark()
        elif option is ThemeOption.CUSTOM:
            self.theme = _load_theme("colors") or ColorTheme.default_dark()
        else:
            print(
                "Warning: the 'themes' directory is deprecated, "
                "use 'colors.yaml' instead.\n",
            )
            legacy = str(Path("themes") / (theme_file or ""))
            self.theme = _load_theme(legacy) or ColorTheme.default_dark()

        if option in (ThemeOption.DEFAULT, ThemeOption.CUSTOM, ThemeOption.CUSTOM_LEGACY):
            self.lscolors: Optional[LsColors] = LsColors.from_env() or LsColors._builtin()
        else:
            self.lscolors = None

    def colorize(self, text: str, elem: Elem) -> str:
        """Return the text styled for the element."""
        return self.style(elem).apply(text)

    def colorize_using_path(
        self, text: str, path: Union[str, os.PathLike], elem: Elem
    ) -> str:
        """Style the text by the file's LS_COLORS entry, else by the element."""
        if self.lscolors is not None:
            style = self.lscolors.style_for_path(path)
            if style is not None:
                return style.apply(text)
        return self.colorize(text, elem)

    def style(self, elem: Elem) -> Style:
        """Return the style used for the element."""
        if self.lscolors is not None:
            indicator = self._indicator_for(elem)
            if indicator is not None:
                return self.lscolors.style_for_indicator(indicator) or Style()
        return self._style_default(elem)

    def _style_default(self, elem: Elem) -> Style:
        if self.theme is None:
            return Style()
        background = _SUID_BACKGROUND if elem.has_suid() else None
        return Style(foreground=elem.get_color(self.theme), background=background)

    @staticmethod
    def _indicator_for(elem: Elem) -> Optional[str]:
        if elem.kind is ElemKind.FILE:
            if elem.uid:
                return None
            return "ex" if elem.exec else "fi"
        if elem.kind is ElemKind.DIR:
            return None if elem.uid else "di"
        return _ELEM_INDICATORS.get(elem.kind)