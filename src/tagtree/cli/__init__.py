"""Command-line interface module for Tag Tree.

This module provides the ``tagtree`` tool for rendering, editing and
inspecting line-oriented markup files.
"""

from .main import main

__all__ = ["main"]
