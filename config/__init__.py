"""
Configuration Package
=====================
Loads settings from .env file.
"""

from .settings import Config

__all__ = ['Config']
