"""Options, configuration, colour themes and grid/tree layout for a colourful directory listing."""

__version__ = "1.1.5"

__all__ = ["cli", "flags", "config", "colors", "grid", "display"]