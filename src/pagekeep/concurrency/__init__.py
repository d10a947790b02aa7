"""Concurrency helpers for pagekeep."""

from .manager import ConcurrencyManager

__all__ = ["ConcurrencyManager"]
