"""
setup-lekko CLI module.

This module provides the command-line interface for setup-lekko.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
