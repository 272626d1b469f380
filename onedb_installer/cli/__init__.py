"""
OneDB installer CLI module.

This module provides the command-line interface for the installer.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
