"""ASCII Morph: animated transitions between ASCII-art words."""

__version__ = "0.1.0"
