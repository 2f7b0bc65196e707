"""Example form flow protected by :class:`xsrf_guard.TokenGuard`."""

from .server import DemoFormServer

__all__ = ["DemoFormServer"]
