"""
Default Form Definitions

Baseline field sets used when a form has to be provisioned for an
application type that has none. Every type gets the base contact,
business and requirements fields; clinical, affiliate and wholesale add
two optional fields each.
"""

from typing import Any, Dict, List, Optional, Tuple

from config.constants import DEFAULT_FORM_VERSION


def _options(*pairs: Tuple[str, str]) -> List[Dict[str, str]]:
    return [{"value": value, "label": label} for value, label in pairs]


def _rule(rule_type: str, message: str, value: Any = None) -> Dict[str, Any]:
    rule = {"type": rule_type, "message": message}
    if value is not None:
        rule["value"] = value
    return rule


def _field(
    field_id: str,
    label: str,
    field_type: str,
    order: float,
    section: str,
    required: bool = True,
    placeholder: Optional[str] = None,
    help_text: Optional[str] = None,
    options: Optional[List[Dict[str, str]]] = None,
    rules: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    data = {
        "fieldId": field_id,
        "label": label,
        "type": field_type,
        "required": required,
        "order": order,
        "section": section,
        "options": options or [],
        "validationRules": rules or [],
    }
    if placeholder:
        data["placeholder"] = placeholder
    if help_text:
        data["helpText"] = help_text
    return data


# =============================================================================
# Base Fields
# =============================================================================

BUSINESS_TYPE_OPTIONS = _options(
    ("diabetic", "Diabetic Care"),
    ("wellness", "Wellness"),
    ("longevity", "Longevity"),
    ("glp1", "GLP-1"),
    ("telehealth", "Telehealth"),
    ("affiliate", "Affiliate"),
    ("wholesale", "Wholesale"),
    ("health-coach", "Health Coach"),
    ("wellness-influencer", "Wellness Influencer"),
    ("other", "Other"),
)

YEARS_IN_BUSINESS_OPTIONS = _options(
    ("0-1", "Less than 1 year"),
    ("2-5", "2-5 years"),
    ("6-10", "6-10 years"),
    ("11-20", "11-20 years"),
    ("20+", "More than 20 years"),
)

TIMELINE_OPTIONS = _options(
    ("immediate", "Immediate (within 1 month)"),
    ("1-3months", "1-3 months"),
    ("3-6months", "3-6 months"),
    ("6months+", "6+ months"),
    ("exploring", "Just exploring options"),
)


def base_fields() -> List[Dict[str, Any]]:
    """Fields shared by every application type."""
    return [
        _field(
            "firstName", "First Name", "text", 1, "personal",
            placeholder="Enter your first name",
            rules=[
                _rule("required", "First name is required"),
                _rule("minLength", "First name cannot be empty", 1),
                _rule("maxLength", "First name must be less than 50 characters", 50),
            ],
        ),
        _field(
            "lastName", "Last Name", "text", 2, "personal",
            placeholder="Enter your last name",
            rules=[
                _rule("required", "Last name is required"),
                _rule("minLength", "Last name cannot be empty", 1),
                _rule("maxLength", "Last name must be less than 50 characters", 50),
            ],
        ),
        _field(
            "email", "Email Address", "email", 3, "personal",
            placeholder="Enter your email address",
            help_text="We will use this email to contact you about your application",
            rules=[
                _rule("required", "Email address is required"),
                _rule("email", "Please provide a valid email address"),
            ],
        ),
        _field(
            "phone", "Phone Number", "phone", 4, "personal",
            placeholder="Enter your phone number",
            rules=[
                _rule("required", "Phone number is required"),
                _rule("phone", "Please provide a valid phone number"),
            ],
        ),
        _field(
            "companyName", "Company Name", "text", 5, "business",
            placeholder="Enter your company name",
            rules=[
                _rule("required", "Company name is required"),
                _rule("minLength", "Company name cannot be empty", 1),
            ],
        ),
        _field(
            "businessType", "Business Type", "select", 6, "business",
            help_text="Select the category that best describes your business",
            options=BUSINESS_TYPE_OPTIONS,
            rules=[_rule("required", "Business type is required")],
        ),
        _field(
            "yearsInBusiness", "Years in Business", "select", 7, "business",
            options=YEARS_IN_BUSINESS_OPTIONS,
            rules=[_rule("required", "Years in business is required")],
        ),
        _field(
            "currentChallenges", "Current Challenges", "textarea", 8, "requirements",
            placeholder="Describe your current business challenges and pain points",
            help_text="Help us understand what specific problems you are trying to solve",
            rules=[
                _rule("required", "Please describe your current challenges"),
                _rule("minLength", "Please provide at least 10 characters", 10),
            ],
        ),
        _field(
            "primaryGoals", "Primary Goals", "textarea", 9, "requirements",
            placeholder="What are your main objectives and goals?",
            help_text="Tell us what you hope to achieve",
            rules=[
                _rule("required", "Please describe your primary goals"),
                _rule("minLength", "Please provide at least 10 characters", 10),
            ],
        ),
        _field(
            "timeline", "Implementation Timeline", "select", 10, "requirements",
            help_text="When do you need this implemented?",
            options=TIMELINE_OPTIONS,
            rules=[_rule("required", "Please select your preferred timeline")],
        ),
    ]


# =============================================================================
# Type-Specific Fields
# =============================================================================

def _clinical_fields() -> List[Dict[str, Any]]:
    return [
        _field(
            "numberOfEmployees", "Number of Employees", "select", 7.5, "business",
            required=False,
            options=_options(
                ("1-5", "1-5 employees"),
                ("6-20", "6-20 employees"),
                ("21-50", "21-50 employees"),
                ("51-100", "51-100 employees"),
                ("100+", "100+ employees"),
            ),
        ),
        _field(
            "currentRevenue", "Annual Revenue", "select", 8.5, "business",
            required=False,
            options=_options(
                ("0-100k", "Under $100k"),
                ("100k-500k", "$100k - $500k"),
                ("500k-1m", "$500k - $1M"),
                ("1m-5m", "$1M - $5M"),
                ("5m+", "Over $5M"),
            ),
        ),
    ]


def _affiliate_fields() -> List[Dict[str, Any]]:
    return [
        _field(
            "audienceSize", "Audience Size", "select", 7.5, "business",
            required=False,
            options=_options(
                ("0-1k", "Under 1,000"),
                ("1k-10k", "1,000 - 10,000"),
                ("10k-50k", "10,000 - 50,000"),
                ("50k-100k", "50,000 - 100,000"),
                ("100k+", "Over 100,000"),
            ),
        ),
        _field(
            "primaryPlatform", "Primary Platform", "select", 8.5, "business",
            required=False,
            options=_options(
                ("instagram", "Instagram"),
                ("youtube", "YouTube"),
                ("tiktok", "TikTok"),
                ("facebook", "Facebook"),
                ("linkedin", "LinkedIn"),
                ("website", "Website/Blog"),
                ("other", "Other"),
            ),
        ),
    ]


def _wholesale_fields() -> List[Dict[str, Any]]:
    return [
        _field(
            "distributionChannels", "Distribution Channels", "multiselect", 7.5, "business",
            required=False,
            options=_options(
                ("retail-stores", "Retail Stores"),
                ("online-marketplace", "Online Marketplace"),
                ("direct-sales", "Direct Sales"),
                ("pharmacy", "Pharmacy"),
                ("healthcare", "Healthcare Facilities"),
            ),
        ),
        _field(
            "orderVolume", "Expected Monthly Order Volume", "select", 8.5, "business",
            required=False,
            options=_options(
                ("1-50", "1-50 units"),
                ("51-200", "51-200 units"),
                ("201-500", "201-500 units"),
                ("501-1000", "501-1,000 units"),
                ("1000+", "Over 1,000 units"),
            ),
        ),
    ]


TYPE_SPECIFIC_FIELDS = {
    "clinical": _clinical_fields,
    "affiliate": _affiliate_fields,
    "wholesale": _wholesale_fields,
}


def get_default_fields_for_type(application_type: str) -> List[Dict[str, Any]]:
    """Base fields plus the type's own fields, sorted by order."""
    extra = TYPE_SPECIFIC_FIELDS.get(application_type)
    fields = base_fields() + (extra() if extra else [])
    return sorted(fields, key=lambda f: f["order"])


# =============================================================================
# Form Payload
# =============================================================================

DEFAULT_SECTIONS = [
    {
        "sectionId": "personal",
        "title": "Personal Information",
        "description": "Basic contact information",
        "order": 1,
    },
    {
        "sectionId": "business",
        "title": "Business Information",
        "description": "Company and business details",
        "order": 2,
    },
    {
        "sectionId": "requirements",
        "title": "Requirements & Goals",
        "description": "Your specific needs and objectives",
        "order": 3,
    },
]


def default_form_payload(application_type: str) -> Dict[str, Any]:
    """
    Complete camelCase document for a type's default form.

    The result validates as FormConfigurationCreate.
    """
    title = application_type.capitalize()
    return {
        "name": f"Default {title} Application Form",
        "description": (
            f"Auto-generated default form for {application_type} applications. "
            "This form provides backwards compatibility with the legacy system "
            "while enabling dynamic form capabilities."
        ),
        "applicationType": application_type,
        "version": DEFAULT_FORM_VERSION,
        "isActive": True,
        "isDefault": True,
        "fields": get_default_fields_for_type(application_type),
        "sections": [dict(s) for s in DEFAULT_SECTIONS],
        "allowPartialSubmission": False,
        "enableAutoSave": True,
        "maxSubmissions": 1,
        "analytics": {
            "trackPageViews": True,
            "trackFieldInteractions": True,
            "trackSubmissionTime": True,
        },
        "notifications": {
            "submitNotification": {
                "enabled": True,
                "recipients": ["admin@company.com"],
                "template": "new-application-notification",
            },
            "confirmationEmail": {
                "enabled": True,
                "template": "application-confirmation",
                "subject": f"Thank you for your {application_type} application",
            },
        },
        "styling": {
            "theme": "default",
            "brandColors": {
                "primary": "#2563eb",
                "secondary": "#64748b",
                "accent": "#0ea5e9",
            },
        },
    }
