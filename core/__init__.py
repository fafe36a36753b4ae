"""
Core Module

Provides database, models and schemas for the application.
"""

from .database import Base, engine, get_db, check_database_health
from .models import FormConfiguration, Application
from .schemas import (
    FieldSchema,
    FormDefinition,
    FormConfigurationCreate,
    FormConfigurationUpdate,
    FormConfigurationResponse,
    ApplicationResponse,
    HealthResponse,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "get_db",
    "check_database_health",
    # Models
    "FormConfiguration",
    "Application",
    # Schemas
    "FieldSchema",
    "FormDefinition",
    "FormConfigurationCreate",
    "FormConfigurationUpdate",
    "FormConfigurationResponse",
    "ApplicationResponse",
    "HealthResponse",
]
