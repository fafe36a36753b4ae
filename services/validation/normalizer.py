"""
Response Normalizer

Best-effort cleanup of a submission that already passed validation.
Never reports errors; values it cannot improve pass through unchanged.
Normalizing twice gives the same result as normalizing once.
"""

import re
from typing import Any, Dict, Mapping

from config.constants import SINGLE_CHOICE_TYPES, FieldType
from core.schemas import FieldSchema, FormDefinition
from services.validation.field_checks import is_empty
from services.validation.fuzzy import find_closest_match, hyphenate


def normalize_phone(value: str) -> str:
    """Keep digits, plus a leading '+' if the number had one."""
    stripped = value.strip()
    digits = re.sub(r"\D", "", stripped)
    return f"+{digits}" if stripped.startswith("+") else digits


def resolve_option(value: str, field: FieldSchema) -> str:
    """Map a select/radio value onto its canonical option value."""
    valid_values = field.option_values
    if value in valid_values:
        return value

    hyphenated = hyphenate(value)
    if hyphenated in valid_values:
        return hyphenated

    return find_closest_match(value, valid_values) or value


def _normalize_value(field: FieldSchema, value: Any) -> Any:
    if not isinstance(value, str):
        return value

    if field.type == FieldType.EMAIL.value:
        return value.strip().lower()
    if field.type == FieldType.PHONE.value:
        return normalize_phone(value)
    if field.type in (FieldType.TEXT.value, FieldType.TEXTAREA.value):
        return value.strip()
    if field.type in SINGLE_CHOICE_TYPES:
        return resolve_option(value, field)
    return value


def normalize_response_data(
    response_data: Mapping[str, Any],
    form: FormDefinition
) -> Dict[str, Any]:
    """
    Rewrite submitted values into canonical form.

    Args:
        response_data: Validated flat submission
        form: Form definition the submission was validated against

    Returns:
        New dict; keys not described by the form are copied as-is
    """
    normalized = dict(response_data)

    for field in form.fields:
        value = normalized.get(field.field_id)
        if is_empty(value):
            continue
        normalized[field.field_id] = _normalize_value(field, value)

    return normalized
