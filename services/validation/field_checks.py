"""
Field Validator Module

Per-field checks used by the response validator:
- Emptiness predicate
- Type conformance for email/phone/number/date fields
- Explicit validation rules (required, minLength, maxLength, pattern,
  email, phone, custom)

Rule checks live in a registry of RuleValidator objects keyed by rule
type. Rule types without a registered validator pass, with a warning.
"""

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from config.constants import DATE_FORMATS, EMAIL_PATTERN, PHONE_PATTERN, FieldType, RuleType
from core.schemas import FieldSchema, ValidationRuleSchema
from utils.logging import get_logger

logger = get_logger(__name__)

EMAIL_REGEX = re.compile(EMAIL_PATTERN)
PHONE_REGEX = re.compile(PHONE_PATTERN)


@dataclass
class CheckResult:
    """Outcome of one type or rule check."""
    is_valid: bool
    message: Optional[str] = None


VALID = CheckResult(is_valid=True)


def is_empty(value: Any) -> bool:
    """None, blank/whitespace-only strings and empty lists count as empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def is_valid_email(value: Any) -> bool:
    return EMAIL_REGEX.fullmatch(str(value)) is not None


def is_valid_phone(value: Any) -> bool:
    return PHONE_REGEX.fullmatch(str(value)) is not None


def is_valid_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value.strip()))
        except ValueError:
            return False
    return False


def is_valid_date(value: Any) -> bool:
    """ISO dates, a few common layouts, or a finite epoch timestamp."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if not isinstance(value, str):
        return False

    text = value.strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass

    # Try common date formats
    for fmt in DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


# =============================================================================
# Type Checks
# =============================================================================

_TYPE_CHECKS: Dict[str, tuple] = {
    FieldType.EMAIL.value: (is_valid_email, "Please provide a valid email address"),
    FieldType.PHONE.value: (is_valid_phone, "Please provide a valid phone number"),
    FieldType.NUMBER.value: (is_valid_number, "Please provide a valid number"),
    FieldType.DATE.value: (is_valid_date, "Please provide a valid date"),
}


def check_field_type(field: FieldSchema, value: Any) -> CheckResult:
    """
    Check a non-empty value against its field type.

    Types without a format (text, select, file, ...) always pass here and
    are constrained only by explicit rules.
    """
    check = _TYPE_CHECKS.get(field.type)
    if check is None:
        return VALID

    predicate, message = check
    if predicate(value):
        return VALID
    return CheckResult(is_valid=False, message=message)


# =============================================================================
# Rule Validators
# =============================================================================

def _length_bound(rule_value: Any) -> Optional[float]:
    if isinstance(rule_value, bool):
        return None
    try:
        return float(rule_value)
    except (TypeError, ValueError):
        return None


class RuleValidator(ABC):
    """Base rule validator interface."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule type handled by this validator."""
        pass

    @abstractmethod
    def check(
        self,
        rule: ValidationRuleSchema,
        value: Any,
        field: FieldSchema
    ) -> CheckResult:
        pass


class RequiredRule(RuleValidator):

    @property
    def name(self) -> str:
        return RuleType.REQUIRED.value

    def check(self, rule, value, field) -> CheckResult:
        if is_empty(value):
            return CheckResult(False, f"{field.label} is required")
        return VALID


class MinLengthRule(RuleValidator):
    """String must be at least `rule.value` characters long."""

    @property
    def name(self) -> str:
        return RuleType.MIN_LENGTH.value

    def check(self, rule, value, field) -> CheckResult:
        bound = _length_bound(rule.value)
        if isinstance(value, str) and bound is not None and len(value) >= bound:
            return VALID
        return CheckResult(False, f"{field.label} must be at least {rule.value} characters long")


class MaxLengthRule(RuleValidator):
    """String must be at most `rule.value` characters long."""

    @property
    def name(self) -> str:
        return RuleType.MAX_LENGTH.value

    def check(self, rule, value, field) -> CheckResult:
        bound = _length_bound(rule.value)
        if isinstance(value, str) and bound is not None and len(value) <= bound:
            return VALID
        return CheckResult(False, f"{field.label} must be no more than {rule.value} characters long")


class PatternRule(RuleValidator):
    """Value must contain a match for the regular expression in `rule.value`."""

    @property
    def name(self) -> str:
        return RuleType.PATTERN.value

    def check(self, rule, value, field) -> CheckResult:
        try:
            matched = re.search(str(rule.value), str(value)) is not None
        except re.error as e:
            logger.error(f"Invalid pattern on field {field.field_id}: {e}")
            return VALID
        if matched:
            return VALID
        return CheckResult(False, rule.message or f"{field.label} format is invalid")


class EmailRule(RuleValidator):

    @property
    def name(self) -> str:
        return RuleType.EMAIL.value

    def check(self, rule, value, field) -> CheckResult:
        if is_valid_email(value):
            return VALID
        return CheckResult(False, "Please provide a valid email address")


class PhoneRule(RuleValidator):

    @property
    def name(self) -> str:
        return RuleType.PHONE.value

    def check(self, rule, value, field) -> CheckResult:
        if is_valid_phone(value):
            return VALID
        return CheckResult(False, "Please provide a valid phone number")


class CustomRule(RuleValidator):
    """
    Extension point for rules with no executable implementation.

    Always passes; register a RuleValidator named "custom" to replace it.
    """

    @property
    def name(self) -> str:
        return RuleType.CUSTOM.value

    def check(self, rule, value, field) -> CheckResult:
        logger.warning(f"Custom validation rule not implemented for field: {field.field_id}")
        return VALID


class FieldValidator:
    """
    Type and rule checks for a single field.

    Usage:
        validator = FieldValidator()
        result = validator.check_type(field, value)
        for rule in field.validation_rules:
            result = validator.apply_rule(rule, value, field)
    """

    def __init__(self):
        """Initialize with built-in rule validators."""
        self._rules: Dict[str, RuleValidator] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        builtins = [
            RequiredRule(),
            MinLengthRule(),
            MaxLengthRule(),
            PatternRule(),
            EmailRule(),
            PhoneRule(),
            CustomRule(),
        ]
        for v in builtins:
            self._rules[v.name] = v

    def register_rule(self, validator: RuleValidator) -> None:
        """Register (or replace) the validator for a rule type."""
        self._rules[validator.name] = validator

    def check_type(self, field: FieldSchema, value: Any) -> CheckResult:
        return check_field_type(field, value)

    def apply_rule(
        self,
        rule: ValidationRuleSchema,
        value: Any,
        field: FieldSchema
    ) -> CheckResult:
        validator = self._rules.get(rule.type)
        if validator is None:
            logger.warning(f"Unknown validation rule type: {rule.type}")
            return VALID
        return validator.check(rule, value, field)


# Singleton instance
_field_validator: Optional[FieldValidator] = None


def get_field_validator() -> FieldValidator:
    """Get singleton field validator."""
    global _field_validator
    if _field_validator is None:
        _field_validator = FieldValidator()
    return _field_validator
