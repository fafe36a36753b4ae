"""
Routers Module

API routers for the Hume Connect forms service.
"""

from .applications import router as applications_router
from .form_configurations import router as form_configurations_router

__all__ = ["applications_router", "form_configurations_router"]
