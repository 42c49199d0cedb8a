"""
Exception handlers for the Warden server.

This package contains the global exception handler and a setup function to
register it with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
