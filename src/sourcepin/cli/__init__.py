"""
CLI Command Modules

Each module contains a logical group of related commands.
"""

from sourcepin.cli import annotation, mutations

__all__ = ["annotation", "mutations"]
