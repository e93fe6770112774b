"""Shared helpers."""

from .process import run_command

__all__ = ["run_command"]
