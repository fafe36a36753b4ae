"""
Condition Evaluator Module

Evaluates conditional-logic clauses that show or hide a field depending on
another field's submitted value.

Unknown operators are treated as satisfied.
"""

import math
from typing import Any, Mapping

from config.constants import ConditionOperator, INCLUDING_ACTIONS
from core.schemas import FieldSchema
from utils.logging import get_logger

logger = get_logger(__name__)


def _strict_equals(actual: Any, expected: Any) -> bool:
    # A boolean never equals a number (True == 1 in Python)
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def to_number(value: Any) -> float:
    """
    Coerce a submitted value to a number the way form inputs are compared.

    Missing values and non-numeric strings become NaN, which makes every
    ordering comparison false. Blank strings become 0.
    """
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        if "_" in stripped:
            return math.nan
        try:
            return float(stripped)
        except ValueError:
            return math.nan
    return math.nan


def evaluate_condition(operator: str, actual_value: Any, expected_value: Any) -> bool:
    """
    Evaluate one clause.

    Args:
        operator: Condition operator name (equals, contains, ...)
        actual_value: Current value of the field the clause depends on
        expected_value: Value configured on the clause

    Returns:
        True if the condition holds. Unknown operators return True.
    """
    try:
        op = ConditionOperator(operator)
    except ValueError:
        logger.warning(f"Unknown condition operator: {operator}")
        return True

    if op is ConditionOperator.EQUALS:
        return _strict_equals(actual_value, expected_value)
    if op is ConditionOperator.NOT_EQUALS:
        return not _strict_equals(actual_value, expected_value)
    if op is ConditionOperator.CONTAINS:
        return (
            isinstance(actual_value, str)
            and expected_value is not None
            and str(expected_value) in actual_value
        )
    if op is ConditionOperator.GREATER_THAN:
        # NaN on either side makes this False
        return to_number(actual_value) > to_number(expected_value)
    if op is ConditionOperator.LESS_THAN:
        return to_number(actual_value) < to_number(expected_value)
    if op is ConditionOperator.IN_ARRAY:
        return isinstance(expected_value, list) and actual_value in expected_value

    logger.warning(f"Unhandled condition operator: {operator}")
    return True


def is_field_visible(field: FieldSchema, response_data: Mapping[str, Any]) -> bool:
    """
    Decide whether a field takes part in validation.

    The first clause (in declaration order) whose condition holds decides:
    show/require keep the field, any other action skips it. Fields without
    conditional logic, or with no matching clause, are always included.
    """
    if not field.conditional_logic:
        return True

    for clause in field.conditional_logic:
        dependent_value = response_data.get(clause.depends_on)
        if evaluate_condition(clause.condition, dependent_value, clause.value):
            return clause.action in INCLUDING_ACTIONS

    return True
