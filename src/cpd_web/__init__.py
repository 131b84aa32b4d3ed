"""Flask view of the duplicate report (JSON API + a single HTML page)."""
from __future__ import annotations
from .web import app, main

__all__ = ["app", "main"]
