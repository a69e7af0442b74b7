"""chara: pattern search for AI coding agents."""

from importlib.metadata import version

__version__ = version("chara")
