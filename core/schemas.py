"""
Form Schemas Module

Pydantic models for form configurations and application submissions.
Wire format is camelCase (fieldId, validationRules, ...); Python attributes
are snake_case. Both spellings are accepted on input.

Schemas follow the pattern:
- Base: Core fields (shared)
- Create: For POST requests
- Update: For PUT requests (all optional)
- Response: For API responses (includes id, timestamps)
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from config.constants import DEFAULT_FIELD_SECTION, DEFAULT_FORM_VERSION


FieldTypeLiteral = Literal[
    "text", "textarea", "email", "phone", "number", "select",
    "multiselect", "radio", "checkbox", "date", "file",
]
RuleTypeLiteral = Literal["required", "minLength", "maxLength", "pattern", "email", "phone", "custom"]
ConditionLiteral = Literal["equals", "contains", "not_equals", "greater_than", "less_than", "in_array"]
ActionLiteral = Literal["show", "hide", "require", "optional"]
ApplicationTypeLiteral = Literal["clinical", "affiliate", "wholesale", "custom"]


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Field Schema Components
# =============================================================================

class FieldOption(CamelModel):
    value: str
    label: str
    metadata: Optional[Any] = None


class ValidationRuleSchema(CamelModel):
    """One explicit validation rule attached to a field."""
    type: RuleTypeLiteral
    value: Optional[Any] = None
    message: str

    @model_validator(mode="after")
    def _check_pattern_compiles(self) -> "ValidationRuleSchema":
        if self.type == "pattern":
            if not isinstance(self.value, str):
                raise ValueError("pattern rules need a regular expression string as value")
            try:
                re.compile(self.value)
            except re.error as e:
                raise ValueError(f"invalid pattern {self.value!r}: {e}")
        return self


class ConditionalLogicSchema(CamelModel):
    """Visibility clause: apply `action` when `depends_on` satisfies `condition`."""
    depends_on: str
    condition: ConditionLiteral
    value: Optional[Any] = None
    action: ActionLiteral


class FieldSchema(CamelModel):
    """
    One field of a form configuration.

    `field_id` is unique within its form only; `order` may be fractional.
    """
    field_id: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=200)
    type: FieldTypeLiteral
    required: bool = False
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    order: float
    section: str = DEFAULT_FIELD_SECTION

    options: List[FieldOption] = Field(default_factory=list)
    validation_rules: List[ValidationRuleSchema] = Field(default_factory=list)
    conditional_logic: List[ConditionalLogicSchema] = Field(default_factory=list)

    default_value: Optional[Any] = None
    readonly: bool = False
    hidden: bool = False

    track_changes: bool = True
    include_in_analytics: bool = True
    metadata: Optional[Any] = None

    @property
    def option_values(self) -> List[str]:
        return [opt.value for opt in self.options]


class SectionSchema(CamelModel):
    section_id: str
    title: str
    description: Optional[str] = None
    order: float = 0


# =============================================================================
# Form Definition (engine input)
# =============================================================================

class FormDefinition(CamelModel):
    """
    Read-only view of a form configuration handed to the validation engine.

    Built from a stored configuration via `FormConfiguration.to_definition()`
    or directly in tests.
    """
    id: Optional[int] = None
    name: str
    version: str = DEFAULT_FORM_VERSION
    application_type: str = "custom"
    fields: List[FieldSchema] = Field(default_factory=list)

    def get_field_by_id(self, field_id: str) -> Optional[FieldSchema]:
        return next((f for f in self.fields if f.field_id == field_id), None)

    @property
    def required_fields(self) -> List[FieldSchema]:
        return [f for f in self.fields if f.required]

    def info(self) -> Dict[str, Any]:
        """Summary used in error bodies and validation metadata."""
        return {"id": self.id, "name": self.name, "version": self.version}


# =============================================================================
# Form Configuration Schemas
# =============================================================================

def _default_analytics() -> Dict[str, Any]:
    return {"trackPageViews": True, "trackFieldInteractions": True, "trackSubmissionTime": True}


class FormConfigurationBase(CamelModel):
    """Base form configuration schema."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    application_type: ApplicationTypeLiteral
    version: str = Field(DEFAULT_FORM_VERSION, max_length=20)
    is_active: bool = True
    is_default: bool = False

    fields: List[FieldSchema] = Field(default_factory=list)
    sections: List[SectionSchema] = Field(default_factory=list)

    allow_partial_submission: bool = False
    enable_auto_save: bool = True
    max_submissions: int = Field(1, ge=0)

    notifications: Dict[str, Any] = Field(default_factory=dict)
    analytics: Dict[str, Any] = Field(default_factory=_default_analytics)
    access_control: Dict[str, Any] = Field(default_factory=dict)
    styling: Dict[str, Any] = Field(default_factory=dict)


class FormConfigurationCreate(FormConfigurationBase):
    """Schema for creating a form configuration."""
    pass


class FormConfigurationUpdate(CamelModel):
    """
    Schema for updating a form configuration (all optional).

    Unknown keys, including id/createdBy/createdAt/updatedAt, are ignored.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    application_type: Optional[ApplicationTypeLiteral] = None
    version: Optional[str] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None
    fields: Optional[List[FieldSchema]] = None
    sections: Optional[List[SectionSchema]] = None
    allow_partial_submission: Optional[bool] = None
    enable_auto_save: Optional[bool] = None
    max_submissions: Optional[int] = Field(None, ge=0)
    notifications: Optional[Dict[str, Any]] = None
    analytics: Optional[Dict[str, Any]] = None
    access_control: Optional[Dict[str, Any]] = None
    styling: Optional[Dict[str, Any]] = None
    published_at: Optional[datetime] = None


class FormConfigurationResponse(FormConfigurationBase):
    """Schema for form configuration in API responses."""
    id: int
    statistics: Dict[str, Any] = Field(default_factory=dict)
    created_by: Optional[str] = None
    last_modified_by: Optional[str] = None
    published_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class FormCloneRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class FormTestRequest(CamelModel):
    test_data: Dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Application Schemas
# =============================================================================

class ApplicationResponse(CamelModel):
    """Persisted application submission."""
    id: int
    application_type: str
    form_configuration_id: Optional[int] = None
    form_version: Optional[str] = None
    response_data: Dict[str, Any] = Field(default_factory=dict)
    validation_metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
