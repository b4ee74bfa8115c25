"""
Logging Infrastructure

Configures the stdlib logging tree for the CLI and embedding applications.
"""

from .logging_setup import configure_logging

__all__ = ["configure_logging"]
