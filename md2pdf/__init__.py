"""Typeset Markdown to PDF for publishing."""

__version__ = "0.2.0"
