"""
Tests for the response validator.

Run: pytest tests/test_engine.py -v
"""

import pytest

from core.schemas import FormDefinition
from services.validation.engine import ResponseValidator, ValidationResult, get_validation_engine


def build_form(fields):
    return FormDefinition.model_validate({"name": "Test Form", "fields": fields})


@pytest.fixture
def validator():
    return ResponseValidator()


class TestRequiredFields:
    """Required-empty handling."""

    @pytest.mark.parametrize("empty", [None, "", "   ", []])
    def test_required_empty_yields_one_error(self, validator, empty):
        form = build_form([{
            "fieldId": "email",
            "label": "Email",
            "type": "email",
            "required": True,
            "order": 1,
            "validationRules": [
                {"type": "minLength", "value": 5, "message": "too short"},
                {"type": "pattern", "value": "@", "message": "needs @"},
            ],
        }])
        result = validator.validate({"email": empty}, form)

        assert result.is_valid is False
        assert len(result.errors) == 1
        assert result.errors[0].type == "required"
        assert result.errors[0].message == "Email is required"

    def test_missing_key_counts_as_empty(self, validator):
        form = build_form([{"fieldId": "name", "label": "Name", "type": "text", "required": True, "order": 1}])
        result = validator.validate({}, form)
        assert [e.field for e in result.errors] == ["name"]

    def test_empty_submission_against_three_required_fields(self, validator, contact_form):
        result = validator.validate({}, contact_form)

        assert result.is_valid is False
        assert len(result.errors) == 3
        assert {e.field for e in result.errors} == {"fullName", "email", "phone"}

    def test_optional_empty_field_is_skipped(self, validator):
        form = build_form([{
            "fieldId": "website",
            "label": "Website",
            "type": "text",
            "order": 1,
            "validationRules": [{"type": "minLength", "value": 10, "message": "too short"}],
        }])
        assert validator.validate({"website": "  "}, form).is_valid is True


class TestConditionalFields:

    def test_hidden_required_field_is_not_checked(self, validator):
        form = build_form([
            {"fieldId": "hasClinic", "label": "Has Clinic", "type": "radio", "order": 1,
             "options": [{"value": "yes", "label": "Yes"}, {"value": "no", "label": "No"}]},
            {"fieldId": "clinicName", "label": "Clinic Name", "type": "text", "required": True, "order": 2,
             "conditionalLogic": [
                 {"dependsOn": "hasClinic", "condition": "equals", "value": "no", "action": "hide"},
             ]},
        ])
        assert validator.validate({"hasClinic": "no"}, form).is_valid is True

        shown = validator.validate({"hasClinic": "yes"}, form)
        assert [e.field for e in shown.errors] == ["clinicName"]

    def test_hidden_flag_does_not_skip_validation(self, validator):
        form = build_form([
            {"fieldId": "source", "label": "Source", "type": "text", "required": True, "order": 1, "hidden": True},
        ])
        assert validator.validate({}, form).is_valid is False


class TestTypeAndRules:

    def test_type_failure_short_circuits_rules(self, validator):
        form = build_form([{
            "fieldId": "email",
            "label": "Email",
            "type": "email",
            "required": True,
            "order": 1,
            "validationRules": [
                {"type": "minLength", "value": 50, "message": "too short"},
                {"type": "pattern", "value": "^x", "message": "must start with x"},
            ],
        }])
        result = validator.validate({"email": "not-an-email"}, form)

        assert len(result.errors) == 1
        assert result.errors[0].type == "type"
        assert result.errors[0].message == "Please provide a valid email address"

    def test_rule_errors_accumulate(self, validator):
        form = build_form([{
            "fieldId": "code",
            "label": "Code",
            "type": "text",
            "order": 1,
            "validationRules": [
                {"type": "minLength", "value": 10, "message": "Code too short"},
                {"type": "pattern", "value": "^[A-Z]+$", "message": "Code must be uppercase letters"},
                {"type": "maxLength", "value": 100, "message": "Code too long"},
            ],
        }])
        result = validator.validate({"code": "abc1"}, form)

        assert len(result.errors) == 2
        assert [e.message for e in result.errors] == ["Code too short", "Code must be uppercase letters"]
        assert [e.type for e in result.errors] == ["minLength", "pattern"]
        assert result.errors[0].rule == {"type": "minLength", "value": 10, "message": "Code too short"}

    def test_all_fields_are_checked(self, validator, contact_form):
        result = validator.validate({"fullName": "Jane", "email": "bad", "phone": "123"}, contact_form)
        assert {e.field for e in result.errors} == {"email", "phone"}


class TestOptionWarnings:

    def test_near_miss_warns_with_suggestion(self, validator, contact_form, valid_contact_data):
        result = validator.validate(valid_contact_data, contact_form)

        assert result.is_valid is True
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.type == "option_mismatch"
        assert warning.suggestion == "wellness"
        assert warning.message == '"Wellnes" is not a valid option for Practice Type. Did you mean "wellness"?'

    def test_unmatched_option_lists_valid_values(self, validator, contact_form, valid_contact_data):
        data = dict(valid_contact_data, practiceType="orthopedics")
        result = validator.validate(data, contact_form)

        assert result.is_valid is True
        assert result.warnings[0].type == "invalid_option"
        assert "Valid options: wellness, diabetic, longevity" in result.warnings[0].message

    def test_exact_option_has_no_warning(self, validator, contact_form, valid_contact_data):
        data = dict(valid_contact_data, practiceType="diabetic")
        assert validator.validate(data, contact_form).warnings == []

    def test_multiselect_warns_per_unknown_value(self, validator):
        form = build_form([{
            "fieldId": "channels",
            "label": "Channels",
            "type": "multiselect",
            "order": 1,
            "options": [{"value": "pharmacy", "label": "Pharmacy"}, {"value": "healthcare", "label": "Healthcare"}],
        }])
        result = validator.validate({"channels": ["pharmacy", "gyms", "spas"]}, form)

        assert result.is_valid is True
        assert [w.type for w in result.warnings] == ["invalid_multiselect_option"] * 2
        assert result.warnings[0].message == '"gyms" is not a valid option for Channels'

    def test_multiselect_scalar_value_is_checked(self, validator):
        form = build_form([{
            "fieldId": "channels",
            "label": "Channels",
            "type": "multiselect",
            "order": 1,
            "options": [{"value": "pharmacy", "label": "Pharmacy"}],
        }])
        result = validator.validate({"channels": "gyms"}, form)
        assert len(result.warnings) == 1


class TestUnexpectedFields:

    def test_unknown_keys_warn_once_each(self, validator, contact_form, valid_contact_data):
        data = dict(valid_contact_data, practiceType="wellness", referrer="ad", utm="spring")
        result = validator.validate(data, contact_form)

        unexpected = [w for w in result.warnings if w.type == "unexpected_field"]
        assert [w.field for w in unexpected] == ["referrer", "utm"]
        assert unexpected[0].message == 'Unexpected field "referrer" not defined in form configuration'
        assert result.is_valid is True

    def test_application_type_is_reserved(self, validator, contact_form, valid_contact_data):
        data = dict(valid_contact_data, practiceType="wellness", applicationType="clinical")
        assert validator.validate(data, contact_form).warnings == []


class TestResultSerialization:

    def test_to_dict_uses_camel_case(self, validator, contact_form):
        data = validator.validate({"email": "x"}, contact_form).to_dict()

        assert data["isValid"] is False
        assert data["errors"][0] == {
            "field": "fullName",
            "label": "Full Name",
            "message": "Full Name is required",
            "type": "required",
        }

    def test_validity_follows_errors(self):
        assert ValidationResult().is_valid is True


def test_singleton_engine():
    assert get_validation_engine() is get_validation_engine()
