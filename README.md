# lsd

The pieces behind a colourful `ls`: an option parser for listing flags,
a YAML configuration loader, colour themes with `LS_COLORS` support, and a
grid and tree layout engine that measures text by the columns the terminal
shows, not by how many characters the string holds.

It requires Python 3.10 or later and depends on PyYAML and wcwidth.

## What it does not do

This package does not list directories by itself. It has no command to
run. It does not read file metadata, sort entries, pick icons or query
git. It supplies the option parsing, configuration, colouring and layout
that such a listing is built from.

## Command-line options

`lsd.cli.parse_args(argv)` parses a command line, given without the
program name, into a `Cli` dataclass. It knows `-a/--all`, `-A/--almost-all`,
`-l/--long`, `-1/--oneline`, `-R/--recursive`, `--tree`, `--depth`, the
sort flags (`-t`, `-S`, `-T`, `-X`, `-G`, `-v`, `-U`, `--sort`), `-r`,
`--group-dirs`, `--blocks`, `--color`, `--icon`, `--icon-theme`, `--date`,
`--permission`, `--size`, `--hyperlink`, `--header`, `-I/--ignore-glob` and
more. `build_parser()` returns the underlying `argparse` parser.

```python
from lsd.cli import parse_args, CliError

cli = parse_args(["--tree", "--blocks", "size,name", "some/dir"])
print(cli.tree, cli.blocks, cli.inputs)

try:
    parse_args(["--date", "yesterday"])
except CliError as err:
    print(err)
```

With no inputs, `inputs` is `[Path(".")]`. Where two overriding options
are given, such as `--all` and `--almost-all` or `--sort` and a sort flag,
the one given last wins. `--recursive` together with `--tree`, or
`--directory-only` together with `--recursive`, raises `CliError`, as do
values outside an option's allowed choices.

A date format given as `--date +FORMAT` is checked against the strftime
specifiers the formatter understands:

```python
from lsd.cli import validate_time_format, validate_date_argument

validate_time_format("%Y-%m-%d %H:%M")   # returns the format unchanged
validate_date_argument("relative")       # "date", "locale", "relative" or "+FORMAT"
```

An unknown specifier (for example `%Q`) or a trailing lone `%` raises
`CliError`.

## Configuration file

Settings may also come from a YAML file. `Config.load_default()` looks for
`config.yaml`, then `config.yml`, in each directory yielded by
`config_paths()`. These are an `lsd` directory under `~/.config`, under the
platform's configuration directory and, outside Windows, under
`$XDG_CONFIG_HOME`. It returns the first file that parses. If none does,
it falls back to the built-in defaults that `Config.builtin()` returns.

```python
from lsd.config import Config, ConfigError, expand_home

config = Config.from_yaml("""
classic: false
blocks: [permission, user, size, date, name]
sorting:
  column: time
  reverse: true
  dir-grouping: first
""")

path = expand_home("~/.config/lsd/config.yaml")
if path is not None:
    config = Config.from_file(path)
```

Keys are kebab-case and map to snake_case attributes. `from_yaml` raises
`ConfigError` for several problems:

- unknown top-level keys (unknown keys inside a section are ignored),
- values of the wrong type,
- choices outside the allowed set.

`from_file` returns `None` in three cases:

- when the file does not exist,
- when the file cannot be read, after printing a message on stderr,
- when the file is malformed, also after a message on stderr.

`expand_home` replaces a leading `~` with the home directory. It returns
`None` if the home directory cannot be found.

`lsd.flags.Configurable` is a base class for a single setting. Its
`configure_from(cli, config)` takes the first value that is not `None`, in
this order:

1. `from_cli`
2. `from_environment`
3. `from_config`
4. `default()`

## Colours

`lsd.colors.Colors` turns a piece of text and the `Elem` it represents into
styled terminal output. The `ThemeOption` passed to it decides the result:

- `NO_COLOR`: the text comes back unchanged.
- `DEFAULT` and `NO_LSCOLORS`: the built-in `ColorTheme.default_dark()` is used.
- `CUSTOM`: the theme is read from `colors.yaml` or `colors.yml` in the configuration directories.
- `CUSTOM_LEGACY`: the theme is read from the deprecated `themes` directory, with a warning.

Any theme file that is missing or invalid falls back to the default theme.

With `DEFAULT`, `CUSTOM` and `CUSTOM_LEGACY`, styles from `LS_COLORS` take
precedence for file types. If that variable is unset, a built-in
`LS_COLORS` specification is used instead. `colorize_using_path` also
honours `LS_COLORS` extension patterns.

```python
from lsd.colors import Colors, ThemeOption, ColorTheme, Elem, ElemKind

colors = Colors(ThemeOption.NO_LSCOLORS)
print(colors.colorize("notes.txt", Elem(ElemKind.FILE)))

theme = ColorTheme.default_dark()
print(Elem(ElemKind.FILE, exec=True).get_color(theme))
```

Files and directories with the set-uid bit are drawn on a red background
when the theme, not `LS_COLORS`, styles them. `LsColors.parse` reads an
`LS_COLORS` string. `ColorTheme.from_mapping` builds a theme from parsed
YAML, and keys it leaves out keep their defaults.

## Layout

`lsd.grid` arranges `Cell`s with a `Grid`, in one of two ways:

- across a terminal width, with `fit_into_width`, which returns `None` if the cells cannot fit;
- into a fixed number of columns, with `fit_into_columns`.

Cells fill the grid `TOP_TO_BOTTOM` or `LEFT_TO_RIGHT`. Widths are measured
with `get_visible_width`. It ignores ANSI colour sequences and, when asked
to, OSC 8 hyperlink markers. It counts wide CJK characters and emoji as two
columns.

```python
from lsd.grid import Cell, Direction, Grid, get_visible_width

get_visible_width("日本語", False)   # 6

grid = Grid(Direction.LEFT_TO_RIGHT, filling=1)
for text in ["a", "bb", "ccc", "d"]:
    grid.add(Cell(text))
print(grid.fit_into_columns(2), end="")
```

`lsd.display` supplies several helpers:

- `entry_prefix` and `child_prefix` draw the tree (`├──`, `│  `, `└──`).
- `should_display_folder_path` decides whether to print a folder heading before its contents.
- `display_folder_path` formats that heading.
- `header_cells` returns centred, underlined header cells sized to their columns.

## Running the tests

Install the `test` extra, then run `pytest` from the project directory.