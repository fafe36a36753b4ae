"""
Form Services Package

Form configuration store, default form provisioning and application intake.
"""

from services.forms.form_service import (
    FormConfigurationService,
    check_field_invariants,
    initialize_default_forms,
)
from services.forms.defaults import default_form_payload, get_default_fields_for_type
from services.forms.intake import (
    ValidatedSubmission,
    flatten_submission,
    submit_application,
    validate_dynamic_application,
)

__all__ = [
    "FormConfigurationService",
    "check_field_invariants",
    "initialize_default_forms",
    "default_form_payload",
    "get_default_fields_for_type",
    "ValidatedSubmission",
    "flatten_submission",
    "submit_application",
    "validate_dynamic_application",
]
