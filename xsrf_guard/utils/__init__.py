"""Utility helpers for time handling."""

from .time import Clock, unix_now

__all__ = ["Clock", "unix_now"]
