"""
Database Models Module

Defines SQLAlchemy ORM models for the application.
All models inherit from Base defined in database.py.

Models:
    - FormConfiguration: Schema describing one application type's fields
    - Application: Accepted submission, validated against a form
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text, Boolean, JSON, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from typing import List

from .database import Base
from .schemas import FieldSchema, FormDefinition


def empty_statistics() -> dict:
    return {
        "totalViews": 0,
        "totalSubmissions": 0,
        "conversionRate": 0,
        "averageCompletionTime": 0,
    }


class FormConfiguration(Base):
    """
    Stored form configuration.

    Fields are kept as a JSON list of camelCase field documents; they have
    no existence outside their form.

    Indexes:
        - (application_type, is_active): lookups by submission flow
        - (is_default, application_type): default-form resolution
    """

    __tablename__ = "form_configurations"
    __table_args__ = (
        Index("ix_form_configurations_type_active", "application_type", "is_active"),
        Index("ix_form_configurations_default_type", "is_default", "application_type"),
    )

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    application_type = Column(String(20), nullable=False)
    version = Column(String(20), default="1.0.0", nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    # Form structure
    fields = Column(JSON, default=list, nullable=False)
    sections = Column(JSON, default=list, nullable=False)

    # Form behavior
    allow_partial_submission = Column(Boolean, default=False, nullable=False)
    enable_auto_save = Column(Boolean, default=True, nullable=False)
    max_submissions = Column(Integer, default=1, nullable=False)

    notifications = Column(JSON, default=dict, nullable=False)
    analytics = Column(JSON, default=dict, nullable=False)
    access_control = Column(JSON, default=dict, nullable=False)
    styling = Column(JSON, default=dict, nullable=False)
    statistics = Column(JSON, default=empty_statistics, nullable=False)

    # Metadata
    created_by = Column(String(64), nullable=False)
    last_modified_by = Column(String(64), nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    archived_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    applications = relationship("Application", back_populates="form_configuration")

    def __repr__(self) -> str:
        return f"<FormConfiguration(id={self.id}, name='{self.name}', type='{self.application_type}')>"

    @property
    def field_schemas(self) -> List[FieldSchema]:
        return [FieldSchema.model_validate(f) for f in (self.fields or [])]

    def get_field_by_id(self, field_id: str):
        return next((f for f in self.field_schemas if f.field_id == field_id), None)

    def to_definition(self) -> FormDefinition:
        """Read-only engine view of this configuration."""
        return FormDefinition(
            id=self.id,
            name=self.name,
            version=self.version,
            application_type=self.application_type,
            fields=self.field_schemas,
        )


class Application(Base):
    """
    Accepted application submission.

    `form_configuration_id` is null when dynamic validation was bypassed
    because no form could be resolved for the submission's type.
    """

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)

    application_type = Column(String(20), nullable=False, index=True)
    form_configuration_id = Column(
        Integer,
        ForeignKey("form_configurations.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    form_version = Column(String(20), nullable=True)

    response_data = Column(JSON, default=dict, nullable=False)
    validation_metadata = Column(JSON, default=dict, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    form_configuration = relationship("FormConfiguration", back_populates="applications")

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, type='{self.application_type}', form={self.form_configuration_id})>"

    def summary(self) -> dict:
        """Short form used in a form's recent-applications list."""
        data = self.response_data or {}
        return {
            "id": self.id,
            "email": data.get("email"),
            "firstName": data.get("firstName"),
            "lastName": data.get("lastName"),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
