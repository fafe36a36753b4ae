"""
Application Constants

Centralizes the vocabulary of the dynamic form engine: field types,
validation rule types, conditional operators and actions, and the
thresholds used when correcting near-miss option values.

Usage:
    from config.constants import FieldType, ConditionOperator, FUZZY_MATCH_MAX_DISTANCE
"""

from enum import Enum


# =============================================================================
# Application Types
# =============================================================================

class ApplicationType(str, Enum):
    """Partition key deciding which form applies to a submission flow."""
    CLINICAL = "clinical"
    AFFILIATE = "affiliate"
    WHOLESALE = "wholesale"
    CUSTOM = "custom"


APPLICATION_TYPES = [t.value for t in ApplicationType]


# =============================================================================
# Field Schema Vocabulary
# =============================================================================

class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PHONE = "phone"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    FILE = "file"


class RuleType(str, Enum):
    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    EMAIL = "email"
    PHONE = "phone"
    CUSTOM = "custom"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IN_ARRAY = "in_array"


class ConditionAction(str, Enum):
    SHOW = "show"
    HIDE = "hide"
    REQUIRE = "require"
    OPTIONAL = "optional"


# Actions that keep a field in validation when their condition holds
INCLUDING_ACTIONS = {ConditionAction.SHOW.value, ConditionAction.REQUIRE.value}

# Field types whose value must be one of the declared options
SINGLE_CHOICE_TYPES = {FieldType.SELECT.value, FieldType.RADIO.value}


# =============================================================================
# Submission Handling
# =============================================================================

# Submitted keys never reported as unexpected
RESERVED_SUBMISSION_KEYS = {"applicationType"}

# Nested containers flattened into a single response map, in merge order
NESTED_SUBMISSION_SECTIONS = ("personalInfo", "businessInfo", "requirements")


# =============================================================================
# Matching & Regexes
# =============================================================================

# Maximum Levenshtein distance accepted as a fuzzy option match
FUZZY_MATCH_MAX_DISTANCE = 3

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^[\+]?[\d\s\-\(\)]{10,}$"

# Accepted layouts for date fields besides ISO 8601
DATE_FORMATS = ["%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y"]


# =============================================================================
# Form Defaults
# =============================================================================

DEFAULT_FORM_VERSION = "1.0.0"
DEFAULT_FIELD_SECTION = "general"

# Admin listing pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Number of recent applications shown in a form's usage block
RECENT_APPLICATIONS_LIMIT = 5
