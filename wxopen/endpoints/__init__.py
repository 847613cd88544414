"""Endpoint groups, each a module of free functions taking a client."""

from . import component, ip, menu, message, user

__all__ = ["component", "ip", "menu", "message", "user"]
