"""
Dynamic Form Validation Package

Validates and normalizes application submissions against stored form
configurations.
"""

from services.validation.conditions import evaluate_condition, is_field_visible
from services.validation.field_checks import (
    CheckResult,
    FieldValidator,
    RuleValidator,
    get_field_validator,
    is_empty,
)
from services.validation.fuzzy import find_closest_match, levenshtein_distance
from services.validation.engine import (
    ResponseValidator,
    ValidationIssue,
    ValidationResult,
    get_validation_engine,
)
from services.validation.normalizer import normalize_response_data

__all__ = [
    "evaluate_condition",
    "is_field_visible",
    "CheckResult",
    "FieldValidator",
    "RuleValidator",
    "get_field_validator",
    "is_empty",
    "find_closest_match",
    "levenshtein_distance",
    "ResponseValidator",
    "ValidationIssue",
    "ValidationResult",
    "get_validation_engine",
    "normalize_response_data",
]
