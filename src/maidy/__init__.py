"""Maidy - render Mermaid diagrams and Markdown documents that embed them."""

__version__ = "0.1.0"
