"""
Response Validation Engine Module

Checks a submitted response against a form definition.
Features:
- Conditional visibility per field (hidden fields are never checked)
- Required / type / rule checks with per-field short-circuiting
- Non-blocking option warnings with fuzzy suggestions
- Unexpected-key detection

All problems are accumulated into one ValidationResult; nothing is raised
mid-iteration, so callers see every field's problem in one round trip.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from config.constants import (
    RESERVED_SUBMISSION_KEYS,
    SINGLE_CHOICE_TYPES,
    FieldType,
)
from core.schemas import FieldSchema, FormDefinition
from services.validation.conditions import is_field_visible
from services.validation.field_checks import FieldValidator, get_field_validator, is_empty
from services.validation.fuzzy import find_closest_match, unmatched_values
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationIssue:
    """A single validation error or warning."""
    field: str
    message: str
    type: str
    label: Optional[str] = None
    suggestion: Optional[str] = None
    rule: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"field": self.field}
        if self.label is not None:
            data["label"] = self.label
        data["message"] = self.message
        data["type"] = self.type
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        if self.rule is not None:
            data["rule"] = self.rule
        return data


@dataclass
class ValidationResult:
    """Result of validating a whole submission."""
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


class ResponseValidator:
    """
    Validates submissions against form definitions.

    Usage:
        validator = ResponseValidator()
        result = validator.validate(response_data, form)
        if not result.is_valid:
            ...
    """

    def __init__(self, field_validator: Optional[FieldValidator] = None):
        self.field_validator = field_validator or get_field_validator()

    def validate(
        self,
        response_data: Mapping[str, Any],
        form: FormDefinition
    ) -> ValidationResult:
        """
        Validate a submission.

        Args:
            response_data: Flat map of fieldId -> submitted value
            form: Form definition to validate against

        Returns:
            ValidationResult; valid iff it carries no errors
        """
        result = ValidationResult()
        field_index = {f.field_id: f for f in form.fields}

        for schema in form.fields:
            self._validate_field(schema, response_data, result)

        for key in response_data:
            if key not in field_index and key not in RESERVED_SUBMISSION_KEYS:
                result.warnings.append(ValidationIssue(
                    field=key,
                    message=f'Unexpected field "{key}" not defined in form configuration',
                    type="unexpected_field",
                ))
                logger.debug(f"Unexpected field {key}")

        logger.debug(
            f"Validated against {form.name} v{form.version}: "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result

    def _validate_field(
        self,
        schema: FieldSchema,
        response_data: Mapping[str, Any],
        result: ValidationResult
    ) -> None:
        value = response_data.get(schema.field_id)
        logger.debug(f"Validating field: {schema.field_id} ({schema.type}) value={value!r}")

        if not is_field_visible(schema, response_data):
            logger.debug(f"  Skipped {schema.field_id} (conditional logic)")
            return

        if is_empty(value):
            if schema.required:
                result.errors.append(ValidationIssue(
                    field=schema.field_id,
                    label=schema.label,
                    message=f"{schema.label} is required",
                    type="required",
                ))
            return

        type_check = self.field_validator.check_type(schema, value)
        if not type_check.is_valid:
            result.errors.append(ValidationIssue(
                field=schema.field_id,
                label=schema.label,
                message=type_check.message or f"Invalid {schema.type} format for {schema.label}",
                type="type",
            ))
            return

        for rule in schema.validation_rules:
            outcome = self.field_validator.apply_rule(rule, value, schema)
            if not outcome.is_valid:
                result.errors.append(ValidationIssue(
                    field=schema.field_id,
                    label=schema.label,
                    message=rule.message or outcome.message or f"Validation failed for {schema.label}",
                    type=rule.type,
                    rule=rule.model_dump(by_alias=True),
                ))

        if not schema.options:
            return

        if schema.type in SINGLE_CHOICE_TYPES:
            self._check_single_option(schema, value, result)
        elif schema.type == FieldType.MULTISELECT.value:
            selected = value if isinstance(value, list) else [value]
            for bad in unmatched_values(selected, schema.option_values):
                result.warnings.append(ValidationIssue(
                    field=schema.field_id,
                    label=schema.label,
                    message=f'"{bad}" is not a valid option for {schema.label}',
                    type="invalid_multiselect_option",
                ))

    def _check_single_option(
        self,
        schema: FieldSchema,
        value: Any,
        result: ValidationResult
    ) -> None:
        valid_values = schema.option_values
        if value in valid_values:
            return

        close_match = find_closest_match(value, valid_values) if isinstance(value, str) else None
        if close_match:
            result.warnings.append(ValidationIssue(
                field=schema.field_id,
                label=schema.label,
                message=(
                    f'"{value}" is not a valid option for {schema.label}. '
                    f'Did you mean "{close_match}"?'
                ),
                suggestion=close_match,
                type="option_mismatch",
            ))
        else:
            result.warnings.append(ValidationIssue(
                field=schema.field_id,
                label=schema.label,
                message=(
                    f'"{value}" is not a valid option for {schema.label}. '
                    f"Valid options: {', '.join(valid_values)}"
                ),
                type="invalid_option",
            ))


# Singleton instance
_validation_engine: Optional[ResponseValidator] = None


def get_validation_engine() -> ResponseValidator:
    """Get singleton response validator."""
    global _validation_engine
    if _validation_engine is None:
        _validation_engine = ResponseValidator()
    return _validation_engine
