"""
Application Intake Module

Request-scoped flow for a public application submission:

1. Default the application type
2. Flatten nested personalInfo / businessInfo / requirements sections
3. Resolve the form: active default -> provision a default -> bypass
4. Validate (failures raise SubmissionValidationError)
5. Normalize and wrap the result in a ValidatedSubmission envelope

A missing form configuration never rejects a submission; it only skips
dynamic validation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import NESTED_SUBMISSION_SECTIONS
from config.settings import settings
from core.models import Application, FormConfiguration
from services.forms.form_service import SYSTEM_USER_ID, FormConfigurationService
from services.validation.engine import get_validation_engine
from services.validation.normalizer import normalize_response_data
from utils.exceptions import HumeConnectError, SubmissionValidationError, ValidationSystemError
from utils.logging import get_logger, log_form_action

logger = get_logger(__name__)


@dataclass
class ValidatedSubmission:
    """Normalized submission plus the form it was validated against."""
    response_data: Dict[str, Any]
    form_configuration_id: Optional[int]
    form_version: str
    application_type: str
    validated_at: str
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    form_info: Dict[str, Any] = field(default_factory=dict)

    @property
    def validation_metadata(self) -> Dict[str, Any]:
        return {
            "validatedAt": self.validated_at,
            "validationWarnings": self.warnings,
            "formConfigUsed": self.form_info,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "responseData": self.response_data,
            "formConfiguration": self.form_configuration_id,
            "formVersion": self.form_version,
            "applicationType": self.application_type,
            "validationMetadata": self.validation_metadata,
        }


def flatten_submission(request_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge nested sections into one flat response map.

    Sections merge in personalInfo, businessInfo, requirements order, then
    top-level keys overlay them. The section keys themselves are dropped.
    A section counts as present when its value is an object, even an empty
    one. Flat bodies are returned as a shallow copy.
    """
    if not any(isinstance(request_data.get(section), Mapping) for section in NESTED_SUBMISSION_SECTIONS):
        return dict(request_data)

    flattened: Dict[str, Any] = {}
    for section in NESTED_SUBMISSION_SECTIONS:
        nested = request_data.get(section)
        if isinstance(nested, Mapping):
            flattened.update(nested)

    for key, value in request_data.items():
        if key not in NESTED_SUBMISSION_SECTIONS:
            flattened[key] = value
    return flattened


def split_submission(body: Mapping[str, Any]) -> tuple:
    """
    Return (application_type, flat response data) for a raw body.

    Only a missing applicationType takes the default. An explicit null
    becomes "" and other non-string values are stringified; neither matches
    a form, so such submissions bypass dynamic validation.
    """
    request_data = dict(body)
    application_type = request_data.pop("applicationType", settings.DEFAULT_APPLICATION_TYPE)
    if application_type is None:
        application_type = ""
    elif not isinstance(application_type, str):
        application_type = str(application_type)
    return application_type, flatten_submission(request_data)


async def resolve_form(
    service: FormConfigurationService,
    application_type: str
) -> Optional[FormConfiguration]:
    """
    Find the form for a submission, provisioning a default when missing.

    Returns None when no form exists and none could be created.
    """
    form = await service.get_active_form_by_type(application_type)
    if form:
        return form

    logger.warning(f"No active form configuration found for application type: {application_type}")
    if not settings.AUTO_PROVISION_DEFAULT_FORMS:
        return None

    try:
        form = await service.create_default_form_for_type(application_type, SYSTEM_USER_ID)
    except (SQLAlchemyError, ValueError, HumeConnectError) as e:
        await service.db.rollback()
        logger.error(f"Failed to create default form configuration for {application_type}: {e}")
        return None

    logger.info(f"Created default form configuration: {form.name}")
    return form


async def validate_dynamic_application(
    db: AsyncSession,
    body: Mapping[str, Any]
) -> Optional[ValidatedSubmission]:
    """
    Validate a raw submission body against its application type's form.

    Returns:
        ValidatedSubmission, or None when dynamic validation was bypassed

    Raises:
        SubmissionValidationError: the submission has validation errors
        ValidationSystemError: anything else went wrong
    """
    try:
        application_type, response_data = split_submission(body)

        form = await resolve_form(FormConfigurationService(db), application_type)
        if form is None:
            logger.warning("Falling back to submission without dynamic validation")
            return None

        definition = form.to_definition()
        logger.debug(
            f"Using form configuration: {definition.name} v{definition.version} "
            f"({len(definition.fields)} fields, {len(definition.required_fields)} required)"
        )

        result = get_validation_engine().validate(response_data, definition)
        warnings = [w.to_dict() for w in result.warnings]

        if not result.is_valid:
            log_form_action("validate", definition.name, False, f"{len(result.errors)} errors")
            raise SubmissionValidationError(
                errors=[e.to_dict() for e in result.errors],
                warnings=warnings,
                form_info=definition.info(),
            )

        if warnings:
            logger.info(f"Proceeding with {len(warnings)} validation warnings")

        return ValidatedSubmission(
            response_data=normalize_response_data(response_data, definition),
            form_configuration_id=definition.id,
            form_version=definition.version,
            application_type=application_type,
            validated_at=datetime.now(timezone.utc).isoformat(),
            warnings=warnings,
            form_info=definition.info(),
        )

    except SubmissionValidationError:
        raise
    except Exception as e:
        logger.error(f"Dynamic validation error: {e}", exc_info=True)
        raise ValidationSystemError(cause=str(e), expose_details=settings.is_development) from e


async def submit_application(db: AsyncSession, body: Mapping[str, Any]) -> Application:
    """Validate a submission and persist it as an Application."""
    validated = await validate_dynamic_application(db, body)

    if validated is not None:
        application = Application(
            application_type=validated.application_type,
            form_configuration_id=validated.form_configuration_id,
            form_version=validated.form_version,
            response_data=validated.response_data,
            validation_metadata=validated.validation_metadata,
        )
    else:
        application_type, response_data = split_submission(body)
        application = Application(
            application_type=application_type,
            form_configuration_id=None,
            form_version=None,
            response_data=response_data,
            validation_metadata={"dynamicValidation": "skipped"},
        )

    db.add(application)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise
    await db.refresh(application)

    logger.info(
        f"Application {application.id} stored for {application.application_type} "
        f"(form={application.form_configuration_id})"
    )
    return application
