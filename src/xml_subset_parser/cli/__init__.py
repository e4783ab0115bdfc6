"""Command-line interface module for XML Subset Parser.

Reads a single document and prints its token stream and tree as text or JSON.
"""

from .main import main

__all__ = ["main"]
