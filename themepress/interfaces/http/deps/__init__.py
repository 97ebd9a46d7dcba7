"""Reusable FastAPI dependencies."""

from .container import get_author, get_container, get_theme_service

__all__ = [
    "get_author",
    "get_container",
    "get_theme_service",
]
