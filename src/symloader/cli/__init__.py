"""
CLI support modules: output mode configuration and machine-aware printing.
"""

from symloader.cli.config import CLIConfig
from symloader.cli.output import get_console, print_json, print_error

__all__ = ['CLIConfig', 'get_console', 'print_json', 'print_error']
