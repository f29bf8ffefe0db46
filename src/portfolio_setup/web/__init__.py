"""
Web surface (setup form and submission endpoint).
"""

from .app import create_app, router

__all__ = ["create_app", "router"]
