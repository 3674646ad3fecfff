"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
import typer
from typing import Any, Optional
from rich.console import Console as RichConsole
from rich.table import Table

from symloader.cli.config import CLIConfig


class MachineAwareConsole:
    """
    A Console wrapper that automatically adapts output based on machine mode.
    Acts as a drop-in replacement for rich.console.Console.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        """Print that respects machine mode."""
        if not CLIConfig.is_machine_mode():
            self._rich_console.print(*args, **kwargs)
            return

        for arg in args:
            if isinstance(arg, str):
                # Echoed verbatim, no markup parsing
                if arg.strip():
                    typer.echo(arg)
            elif isinstance(arg, Table) or hasattr(arg, '__rich__'):
                # Tables are human-mode only - use --json instead
                pass
            elif arg:
                typer.echo(arg)

    def __getattr__(self, name):
        """Delegate all other attributes to the rich console."""
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def print_json(data: dict, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        typer.echo(json.dumps(data, separators=(',', ':')))
    else:
        typer.echo(json.dumps(data, indent=2))


def structured_error(code: str, message: str, input_value: Optional[str] = None) -> dict:
    """
    Create a structured error object.

    Args:
        code: Error code (e.g., "SYMBOL_NOT_FOUND")
        message: Human-readable error message
        input_value: The input that caused the error
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if input_value:
        error_obj["input"] = input_value
    return error_obj


def print_error(code: str, message: str, input_value: Optional[str] = None, json_output: bool = False) -> None:
    """
    Print an error message respecting machine mode.
    In machine mode or with --json, outputs a structured JSON error.
    """
    if json_output or CLIConfig.is_machine_mode():
        print_json(structured_error(code, message, input_value))
    else:
        typer.echo(f"Error: {message}", err=True)


def get_console() -> MachineAwareConsole:
    """
    Get the console instance for advanced usage.
    Note: Direct console usage should check machine mode.
    """
    return _console


def describe_value(value: Any) -> str:
    """Short, single-line description of an arbitrary artifact."""
    text = repr(value)
    return text if len(text) <= 120 else text[:117] + "..."
