"""Extract API definitions from Markdown documentation and validate its links."""

__version__ = "0.1.0"
