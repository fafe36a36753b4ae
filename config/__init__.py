"""
Configuration Module

Settings come from the environment (see settings.py); the form engine's
fixed vocabulary lives in constants.py.
"""

from .settings import settings, get_settings, Settings

__all__ = ["settings", "get_settings", "Settings"]
