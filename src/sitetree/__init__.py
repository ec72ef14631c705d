"""sitetree - static site generation from a directory of Markdown pages."""

__version__ = "0.1.0"
