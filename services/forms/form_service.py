"""
Form Configuration Service Module

Business logic for stored form configurations:
- CRUD with archive-instead-of-delete for forms that have applications
- Clone, set-default and dry-run testing against sample data
- Lookup of the active default form per application type
- Default form provisioning

Invariants enforced on every write:
- Field orders unique within a form
- Field ids unique within a form
- At most one default form per application type (siblings cleared in the
  same transaction that sets the flag)
"""

import copy
import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.constants import DEFAULT_FORM_VERSION, DEFAULT_PAGE_SIZE, RECENT_APPLICATIONS_LIMIT
from config.settings import settings
from core.database import SessionLocal
from core.models import Application, FormConfiguration, empty_statistics
from core.schemas import (
    FieldSchema,
    FormConfigurationCreate,
    FormConfigurationUpdate,
    SectionSchema,
)
from services.forms.defaults import default_form_payload
from services.validation.engine import get_validation_engine
from utils.exceptions import FormConfigurationInvalidError, FormNotFoundError, HumeConnectError
from utils.logging import get_logger, log_form_action

logger = get_logger(__name__)

# Recorded as creator of forms provisioned without an admin request
SYSTEM_USER_ID = "system"


def _dump_fields(fields: Iterable[FieldSchema]) -> List[Dict[str, Any]]:
    return [f.model_dump(by_alias=True, exclude_none=True) for f in fields]


def _dump_sections(sections: Iterable[SectionSchema]) -> List[Dict[str, Any]]:
    return [s.model_dump(by_alias=True, exclude_none=True) for s in sections]


def check_field_invariants(fields: List[FieldSchema]) -> List[str]:
    """
    Structural checks on a form's field list.

    Returns:
        Error messages; empty when the fields are consistent
    """
    errors = []

    orders = [f.order for f in fields]
    if len(orders) != len(set(orders)):
        errors.append("Field orders must be unique")

    field_ids = [f.field_id for f in fields]
    if len(field_ids) != len(set(field_ids)):
        errors.append("Field IDs must be unique within the form")

    return errors


class FormConfigurationService:
    """
    Service for form configuration operations.

    One instance per request; every method runs on the request's session.

    Usage:
        service = FormConfigurationService(db)
        form = await service.get_active_form_by_type("clinical")
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Internal helpers
    # =========================================================================

    async def _clear_sibling_defaults(
        self,
        application_type: str,
        exclude_id: Optional[int] = None
    ) -> None:
        """Unset isDefault on every other form of the type (no commit)."""
        stmt = (
            update(FormConfiguration)
            .where(
                FormConfiguration.application_type == application_type,
                FormConfiguration.is_default == True,
            )
            .values(is_default=False)
        )
        if exclude_id is not None:
            stmt = stmt.where(FormConfiguration.id != exclude_id)
        await self.db.execute(stmt)

    async def _commit(self, form: FormConfiguration) -> FormConfiguration:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(form)
        return form

    async def _count_applications(self, form_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Application.id)).where(Application.form_configuration_id == form_id)
        )
        return result.scalar_one()

    # =========================================================================
    # Lookup
    # =========================================================================

    async def get_form(self, form_id: int) -> FormConfiguration:
        """Get form by id or raise FormNotFoundError."""
        result = await self.db.execute(
            select(FormConfiguration).where(FormConfiguration.id == form_id)
        )
        form = result.scalar_one_or_none()
        if not form:
            raise FormNotFoundError(form_id)
        return form

    async def get_active_form_by_type(self, application_type: str) -> Optional[FormConfiguration]:
        """Newest form that is both active and default for the type, or None."""
        result = await self.db.execute(
            select(FormConfiguration)
            .where(
                FormConfiguration.application_type == application_type,
                FormConfiguration.is_active == True,
                FormConfiguration.is_default == True,
            )
            .order_by(FormConfiguration.created_at.desc(), FormConfiguration.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_forms(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        application_type: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_default: Optional[bool] = None,
        search: Optional[str] = None
    ) -> Tuple[List[FormConfiguration], Dict[str, Any]]:
        """
        List forms newest first with optional filters.

        Args:
            page: 1-based page number
            limit: Page size
            application_type: Only forms of this type
            is_active: Filter on the active flag
            is_default: Filter on the default flag
            search: Case-insensitive substring of name or description

        Returns:
            (forms, pagination) where pagination carries currentPage,
            totalPages, totalCount, limit, hasNext and hasPrev
        """
        conditions = []
        if application_type:
            conditions.append(FormConfiguration.application_type == application_type)
        if is_active is not None:
            conditions.append(FormConfiguration.is_active == is_active)
        if is_default is not None:
            conditions.append(FormConfiguration.is_default == is_default)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                FormConfiguration.name.ilike(pattern),
                FormConfiguration.description.ilike(pattern),
            ))

        count_result = await self.db.execute(
            select(func.count(FormConfiguration.id)).where(*conditions)
        )
        total_count = count_result.scalar_one()

        result = await self.db.execute(
            select(FormConfiguration)
            .where(*conditions)
            .order_by(FormConfiguration.created_at.desc(), FormConfiguration.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        forms = list(result.scalars().all())

        total_pages = math.ceil(total_count / limit) if limit else 0
        pagination = {
            "currentPage": page,
            "totalPages": total_pages,
            "totalCount": total_count,
            "limit": limit,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        }
        return forms, pagination

    async def get_form_usage(self, form: FormConfiguration) -> Dict[str, Any]:
        """Application count and the most recent applications for a form."""
        result = await self.db.execute(
            select(Application)
            .where(Application.form_configuration_id == form.id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .limit(RECENT_APPLICATIONS_LIMIT)
        )
        recent = [a.summary() for a in result.scalars().all()]
        return {
            "applicationCount": await self._count_applications(form.id),
            "recentApplications": recent,
        }

    # =========================================================================
    # Writes
    # =========================================================================

    async def create_form(
        self,
        data: FormConfigurationCreate,
        created_by: str
    ) -> FormConfiguration:
        """
        Create a form configuration.

        Raises:
            FormConfigurationInvalidError: no fields, or field invariants broken
        """
        if not data.fields:
            raise FormConfigurationInvalidError(["At least one field is required"])

        errors = check_field_invariants(data.fields)
        if errors:
            raise FormConfigurationInvalidError(errors)

        if data.is_default:
            await self._clear_sibling_defaults(data.application_type)

        form = FormConfiguration(
            name=data.name,
            description=data.description,
            application_type=data.application_type,
            version=data.version,
            is_active=data.is_active,
            is_default=data.is_default,
            fields=_dump_fields(data.fields),
            sections=_dump_sections(data.sections),
            allow_partial_submission=data.allow_partial_submission,
            enable_auto_save=data.enable_auto_save,
            max_submissions=data.max_submissions,
            notifications=data.notifications,
            analytics=data.analytics,
            access_control=data.access_control,
            styling=data.styling,
            statistics=empty_statistics(),
            created_by=created_by,
            last_modified_by=created_by,
        )
        self.db.add(form)
        await self._commit(form)

        log_form_action("create", form.name, True, f"id={form.id} type={form.application_type}")
        return form

    async def update_form(
        self,
        form_id: int,
        data: FormConfigurationUpdate,
        modified_by: str
    ) -> FormConfiguration:
        """Partial update; only keys present in the request are applied."""
        form = await self.get_form(form_id)

        if data.fields is not None:
            errors = check_field_invariants(data.fields)
            if errors:
                raise FormConfigurationInvalidError(errors)

        for key in data.model_fields_set:
            value = getattr(data, key)
            if key == "fields":
                if value is None:
                    continue
                value = _dump_fields(value)
            elif key == "sections":
                if value is None:
                    continue
                value = _dump_sections(value)
            elif value is None and key not in ("description", "published_at"):
                continue
            setattr(form, key, value)

        if form.is_default and data.model_fields_set & {"is_default", "application_type"}:
            await self._clear_sibling_defaults(form.application_type, exclude_id=form.id)

        form.last_modified_by = modified_by
        await self._commit(form)

        log_form_action("update", form.name, True, f"id={form.id}")
        return form

    async def delete_form(self, form_id: int) -> Dict[str, Any]:
        """
        Delete a form, or archive it when applications reference it.

        Returns:
            {"archived": bool, "applicationCount": int, "form": form or None}
        """
        form = await self.get_form(form_id)
        application_count = await self._count_applications(form.id)

        if application_count > 0:
            form.is_active = False
            form.archived_at = datetime.now(timezone.utc)
            await self._commit(form)
            log_form_action("archive", form.name, True, f"{application_count} applications preserved")
            return {"archived": True, "applicationCount": application_count, "form": form}

        name = form.name
        await self.db.delete(form)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        log_form_action("delete", name, True)
        return {"archived": False, "applicationCount": 0, "form": None}

    async def clone_form(
        self,
        form_id: int,
        created_by: str,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> FormConfiguration:
        """Copy a form as a new inactive, non-default 1.0.0 draft."""
        source = await self.get_form(form_id)

        clone = FormConfiguration(
            name=name or f"{source.name} (Copy)",
            description=description or f"Clone of {source.name}",
            application_type=source.application_type,
            version=DEFAULT_FORM_VERSION,
            is_active=False,
            is_default=False,
            fields=copy.deepcopy(source.fields),
            sections=copy.deepcopy(source.sections),
            allow_partial_submission=source.allow_partial_submission,
            enable_auto_save=source.enable_auto_save,
            max_submissions=source.max_submissions,
            notifications=copy.deepcopy(source.notifications),
            analytics=copy.deepcopy(source.analytics),
            access_control=copy.deepcopy(source.access_control),
            styling=copy.deepcopy(source.styling),
            statistics=empty_statistics(),
            created_by=created_by,
            last_modified_by=created_by,
        )
        self.db.add(clone)
        await self._commit(clone)

        log_form_action("clone", clone.name, True, f"from id={source.id}")
        return clone

    async def set_default(
        self,
        form_id: int,
        modified_by: Optional[str] = None
    ) -> FormConfiguration:
        """Make a form the active default of its type in one transaction."""
        form = await self.get_form(form_id)

        await self._clear_sibling_defaults(form.application_type, exclude_id=form.id)
        form.is_default = True
        form.is_active = True
        if modified_by:
            form.last_modified_by = modified_by
        await self._commit(form)

        log_form_action("set-default", form.name, True, f"type={form.application_type}")
        return form

    # =========================================================================
    # Testing & Analytics
    # =========================================================================

    async def test_form(self, form_id: int, test_data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate sample data against a form without persisting anything."""
        form = await self.get_form(form_id)
        result = get_validation_engine().validate(test_data, form.to_definition())

        logger.info(
            f"Form validation test for {form.name}: {'PASSED' if result.is_valid else 'FAILED'}"
        )
        return {
            "formId": form.id,
            "formName": form.name,
            "testResult": result.to_dict(),
            "testData": test_data,
        }

    async def analytics_summary(self) -> Dict[str, Any]:
        """Totals across all forms plus per-form submission counts."""
        total_forms = (await self.db.execute(
            select(func.count(FormConfiguration.id))
        )).scalar_one()
        active_forms = (await self.db.execute(
            select(func.count(FormConfiguration.id)).where(FormConfiguration.is_active == True)
        )).scalar_one()
        total_applications = (await self.db.execute(
            select(func.count(Application.id))
        )).scalar_one()

        submission_count = func.count(Application.id).label("submission_count")
        last_submission = func.max(Application.created_at).label("last_submission")
        rows = await self.db.execute(
            select(
                FormConfiguration.id,
                FormConfiguration.name,
                FormConfiguration.application_type,
                submission_count,
                last_submission,
            )
            .join(Application, Application.form_configuration_id == FormConfiguration.id)
            .group_by(
                FormConfiguration.id,
                FormConfiguration.name,
                FormConfiguration.application_type,
            )
            .order_by(submission_count.desc())
        )

        usage = []
        for form_id, name, application_type, count, last in rows.all():
            if isinstance(last, datetime):
                last = last.isoformat()
            usage.append({
                "formId": form_id,
                "formName": name,
                "applicationType": application_type,
                "submissionCount": count,
                "lastSubmission": last,
            })

        average = math.floor(total_applications / total_forms + 0.5) if total_forms else 0
        return {
            "summary": {
                "totalForms": total_forms,
                "activeForms": active_forms,
                "totalApplications": total_applications,
                "averageSubmissionsPerForm": average,
            },
            "formUsageStats": usage,
        }

    # =========================================================================
    # Default Provisioning
    # =========================================================================

    async def create_default_form_for_type(
        self,
        application_type: str,
        created_by: str = SYSTEM_USER_ID
    ) -> FormConfiguration:
        """
        Persist the baseline form for an application type as its default.

        Raises:
            pydantic.ValidationError: unknown application type
        """
        data = FormConfigurationCreate.model_validate(default_form_payload(application_type))
        return await self.create_form(data, created_by)


async def initialize_default_forms(
    application_types: Optional[List[str]] = None,
    session_factory: async_sessionmaker = SessionLocal
) -> Dict[str, List[str]]:
    """
    Make sure every standard application type has an active default form.

    Failures for one type are logged and do not stop the others.

    Returns:
        {"existing": [...], "created": [...], "failed": [...]}
    """
    types = application_types or settings.STARTUP_FORM_TYPES
    summary: Dict[str, List[str]] = {"existing": [], "created": [], "failed": []}

    async with session_factory() as db:
        service = FormConfigurationService(db)

        for application_type in types:
            try:
                existing = await service.get_active_form_by_type(application_type)
                if existing:
                    logger.info(f"Default form already exists for {application_type}: {existing.name}")
                    summary["existing"].append(application_type)
                    continue

                form = await service.create_default_form_for_type(application_type)
                logger.info(f"Created default form for {application_type}: {form.name} ({form.id})")
                summary["created"].append(application_type)

            except (SQLAlchemyError, ValueError, HumeConnectError) as e:
                await db.rollback()
                logger.error(f"Failed to create default form for {application_type}: {e}")
                summary["failed"].append(application_type)

    ready = len(summary["existing"]) + len(summary["created"])
    logger.info(f"Default form initialization: {ready}/{len(types)} application types ready")
    if summary["failed"]:
        logger.warning(f"Application types needing manual form setup: {', '.join(summary['failed'])}")
    return summary
