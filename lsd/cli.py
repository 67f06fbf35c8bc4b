"""Command-line interface: argument definitions and validation."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

VERSION = "1.1.5"

COLOR_MODES = ("always", "auto", "never")
ICON_THEMES = ("fancy", "unicode")
PERMISSION_MODES = ("rwx", "octal", "attributes", "disable")
SIZE_MODES = ("default", "short", "bytes")
SORT_TYPES = ("size", "time", "version", "type", "extension", "git", "none")
DIR_GROUPINGS = ("none", "first", "last")
BLOCK_NAMES = (
    "permission",
    "user",
    "group",
    "context",
    "size",
    "date",
    "name",
    "inode",
    "links",
    "git",
)
DATE_KEYWORDS = ("date", "relative", "locale")

_SORT_SHORTCUTS = (
    "timesort",
    "sizesort",
    "typesort",
    "extensionsort",
    "versionsort",
    "gitsort",
)

# Pairs of options where whichever appears last on the command line wins.
_OVERRIDE_PAIRS = (
    [("all", "almost_all")]
    + [("sort", name) for name in (*_SORT_SHORTCUTS, "no_sort")]
    + [("no_sort", name) for name in _SORT_SHORTCUTS]
)

# Pairs of options that may not be used together.
_CONFLICTS = (
    ("recursive", "tree", "--recursive", "--tree"),
    ("directory_only", "recursive", "--directory-only", "--recursive"),
)


def _override_table() -> dict[str, frozenset[str]]:
    table: dict[str, set[str]] = {}
    for first, second in _OVERRIDE_PAIRS:
        table.setdefault(first, set()).add(second)
        table.setdefault(second, set()).add(first)
    return {name: frozenset(others) for name, others in table.items()}


_OVERRIDES = _override_table()


class CliError(Exception):
    """Raised when the command line is not valid."""


@dataclass
class Cli:
    """The parsed command line."""

    inputs: list[Path] = field(default_factory=lambda: [Path(".")])
    all: bool = False
    almost_all: bool = False
    color: Optional[str] = None
    icon: Optional[str] = None
    icon_theme: Optional[str] = None
    indicators: bool = False
    long: bool = False
    ignore_config: bool = False
    config_file: Optional[Path] = None
    oneline: bool = False
    recursive: bool = False
    human_readable: bool = False
    tree: bool = False
    depth: Optional[int] = None
    directory_only: bool = False
    permission: Optional[str] = None
    size: Optional[str] = None
    total_size: bool = False
    date: Optional[str] = None
    timesort: bool = False
    sizesort: bool = False
    typesort: bool = False
    extensionsort: bool = False
    gitsort: bool = False
    versionsort: bool = False
    sort: Optional[str] = None
    no_sort: bool = False
    reverse: bool = False
    group_dirs: Optional[str] = None
    group_directories_first: bool = False
    blocks: list[str] = field(default_factory=list)
    classic: bool = False
    no_symlink: bool = False
    ignore_glob: list[str] = field(default_factory=list)
    inode: bool = False
    git: bool = False
    dereference: bool = False
    context: bool = False
    hyperlink: Optional[str] = None
    header: bool = False
    truncate_owner_after: Optional[int] = None
    truncate_owner_marker: Optional[str] = None
    system_protected: bool = False
    literal: bool = False


_PADDED_SPECIFIERS = frozenset("CdefGgHIjklMmSsUuVWwYy")
_PLAIN_SPECIFIERS = frozenset("AaBbCcDdeFfGgHhIjklMmnPpRrSsTtUuVvWwXxYyZz+%")
_FRACTION_DIGITS = frozenset("369")


def validate_time_format(formatter: str) -> str:
    """Check a strftime-like format string; return it unchanged or raise CliError."""
    chars = iter(formatter)

    def following() -> str:
        char = next(chars, None)
        if char is None:
            raise CliError("missing format specifier")
        return char

    for char in chars:
        if char != "%":
            continue
        spec = following()
        if spec == ".":
            sub = following()
            if sub == "f":
                continue
            if sub in _FRACTION_DIGITS:
                last = following()
                if last != "f":
                    raise CliError(f"invalid format specifier: %.{sub}{last}")
                continue
            raise CliError(f"invalid format specifier: %.{sub}")
        if spec in (":", "#"):
            last = following()
            if last != "z":
                raise CliError(f"invalid format specifier: %{spec}{last}")
        elif spec in ("-", "_", "0"):
            last = following()
            if last not in _PADDED_SPECIFIERS:
                raise CliError(f"invalid format specifier: %{spec}{last}")
        elif spec in _PLAIN_SPECIFIERS:
            continue
        elif spec in _FRACTION_DIGITS:
            last = following()
            if last != "f":
                raise CliError(f"invalid format specifier: %{spec}{last}")
        else:
            raise CliError(f"invalid format specifier: %{spec}")
    return formatter


def validate_date_argument(arg: str) -> str:
    """Check the value given to --date; return it unchanged or raise CliError."""
    if arg.startswith("+"):
        return validate_time_format(arg)
    if arg in DATE_KEYWORDS:
        return arg
    raise CliError("possible values: date, locale, relative, +date-time-format")


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise CliError(message)


def _reset_overridden(
    parser: argparse.ArgumentParser, namespace: argparse.Namespace, dest: str
) -> None:
    for other in _OVERRIDES.get(dest, ()):
        setattr(namespace, other, parser.get_default(other))


class _Flag(argparse.Action):
    """A boolean switch that clears the options it overrides."""

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs=0, default=False, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, True)
        _reset_overridden(parser, namespace, self.dest)


class _Value(argparse.Action):
    """An option taking one value that clears the options it overrides."""

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        _reset_overridden(parser, namespace, self.dest)


def _count(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not a non-negative integer") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"'{text}' is not a non-negative integer")
    return value


def _date(text: str) -> str:
    try:
        return validate_date_argument(text)
    except CliError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def _block_list(text: str) -> list[str]:
    names = text.split(",")
    for name in names:
        if name not in BLOCK_NAMES:
            raise argparse.ArgumentTypeError(
                f"invalid value '{name}' [possible values: {', '.join(BLOCK_NAMES)}]"
            )
    return names


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the command line."""
    parser = _Parser(
        prog="lsd",
        description="An ls command with a lot of pretty colors and some other stuff.",
        add_help=False,
        allow_abbrev=False,
    )
    add = parser.add_argument

    add("inputs", metavar="FILE", nargs="*", default=None)
    add("-a", "--all", action=_Flag, help="Do not ignore entries starting with .")
    add("-A", "--almost-all", action=_Flag, help="Do not list implied . and ..")
    add("--color", metavar="MODE", choices=COLOR_MODES,
        help="When to use terminal colours [default: auto]")
    add("--icon", metavar="MODE", choices=COLOR_MODES,
        help="When to print the icons [default: auto]")
    add("--icon-theme", metavar="THEME", choices=ICON_THEMES,
        help="Whether to use fancy or unicode icons [default: fancy]")
    add("-F", "--classify", dest="indicators", action=_Flag,
        help="Append indicator (one of */=>@|) at the end of the file names")
    add("-l", "--long", action=_Flag, help="Display extended file metadata as a table")
    add("--ignore-config", action=_Flag, help="Ignore the configuration file")
    add("--config-file", metavar="PATH", type=Path,
        help="Provide a custom lsd configuration file")
    add("-1", "--oneline", action=_Flag, help="Display one entry per line")
    add("-R", "--recursive", action=_Flag, help="Recurse into directories")
    add("-h", "--human-readable", action=_Flag,
        help="For ls compatibility purposes ONLY, currently set by default")
    add("--tree", action=_Flag,
        help="Recurse into directories and present the result as a tree")
    add("--depth", metavar="NUM", type=_count,
        help="Stop recursing into directories after reaching specified depth")
    add("-d", "--directory-only", action=_Flag,
        help="Display directories themselves, and not their contents")
    add("--permission", metavar="MODE", choices=PERMISSION_MODES,
        help="How to display permissions")
    add("--size", metavar="MODE", choices=SIZE_MODES,
        help="How to display size [default: default]")
    add("--total-size", action=_Flag, help="Display the total size of directories")
    add("--date", type=_date,
        help="How to display date [possible values: date, locale, relative, +date-time-format]")
    add("-t", "--timesort", action=_Flag, help="Sort by time modified")
    add("-S", "--sizesort", action=_Flag, help="Sort by size")
    add("-T", "--typesort", action=_Flag, help="Sort by file type")
    add("-X", "--extensionsort", action=_Flag, help="Sort by file extension")
    add("-G", "--gitsort", action=_Flag, help="Sort by git status")
    add("-v", "--versionsort", action=_Flag,
        help="Natural sort of (version) numbers within text")
    add("--sort", metavar="SORTTYPE", choices=SORT_TYPES, action=_Value,
        help="Sort by SORTTYPE instead of name")
    add("-U", "--no-sort", action=_Flag,
        help="Do not sort. List entries in directory order")
    add("-r", "--reverse", action=_Flag, help="Reverse the order of the sort")
    add("--group-dirs", metavar="MODE", choices=DIR_GROUPINGS,
        help="Sort the directories then the files")
    add("--group-directories-first", action=_Flag,
        help="Groups the directories at the top before the files")
    add("--blocks", type=_block_list, action="extend", default=[],
        help="Specify the blocks that will be displayed and in what order")
    add("--classic", action=_Flag,
        help="Enable classic mode (display output similar to ls)")
    add("--no-symlink", action=_Flag, help="Do not display symlink target")
    add("-I", "--ignore-glob", metavar="PATTERN", action="append", default=[],
        help="Do not display files/directories with names matching the glob pattern(s)")
    add("-i", "--inode", action=_Flag, help="Display the index number of each file")
    add("-g", "--git", action=_Flag,
        help="Show git status on file and directory, only with --long")
    add("-L", "--dereference", action=_Flag,
        help="Show information for the file a symbolic link references")
    add("-Z", "--context", action=_Flag,
        help="Print security context (label) of each file")
    add("--hyperlink", metavar="MODE", choices=COLOR_MODES,
        help="Attach hyperlink to filenames [default: never]")
    add("--header", action=_Flag, help="Display block headers")
    add("--truncate-owner-after", metavar="NUM", type=_count,
        help="Truncate the user and group names after this many characters")
    add("--truncate-owner-marker", metavar="STR",
        help="Truncation marker appended to a truncated user or group name")
    add("--system-protected", action=_Flag,
        help=("Includes files with the windows system protection flag set"
              if sys.platform == "win32" else argparse.SUPPRESS))
    add("-N", "--literal", action=_Flag, help="Print entry names without quoting")
    add("--help", action="help", help="Print help information")
    add("-V", "--version", action="version", version=f"lsd {VERSION}",
        help="Print version information")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Cli:
    """Parse a command line (without the program name) into a Cli."""
    if argv is None:
        argv = sys.argv[1:]
    namespace = build_parser().parse_intermixed_args(list(argv))
    values = vars(namespace)

    for first, second, first_flag, second_flag in _CONFLICTS:
        if values.get(first) and values.get(second):
            raise CliError(
                f"the argument '{first_flag}' cannot be used with '{second_flag}'"
            )

    values["inputs"] = [Path(item) for item in (values.get("inputs") or ["."])]
    return Cli(**values)