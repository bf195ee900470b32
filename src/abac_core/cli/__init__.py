"""Command-line interface for abac-core.

Provides developer commands for validating entitlement files, evaluating
condition trees and running access checks from the shell.
"""

from .main import cli, main

__all__ = ["cli", "main"]
