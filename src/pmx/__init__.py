"""pmx: manage agent instruction profiles across Claude and Codex."""

__version__ = "0.1.0"
