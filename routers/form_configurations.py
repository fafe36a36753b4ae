"""
Form Configuration Router Module

Admin endpoints for managing dynamic form configurations, plus the
public lookup the form renderer uses to fetch a type's default form.

Endpoints:
    GET    /api/admin/forms                                  List (paginated)
    GET    /api/admin/forms/analytics/summary                Usage summary
    GET    /api/admin/forms/types/{applicationType}/default  Public default form
    GET    /api/admin/forms/{form_id}                        Detail + usage
    POST   /api/admin/forms                                  Create
    PUT    /api/admin/forms/{form_id}                        Update
    DELETE /api/admin/forms/{form_id}                        Delete or archive
    POST   /api/admin/forms/{form_id}/clone                  Clone
    POST   /api/admin/forms/{form_id}/set-default            Make default
    POST   /api/admin/forms/{form_id}/test                   Dry-run validation
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from core.database import get_db
from core.models import FormConfiguration
from core.schemas import (
    FormCloneRequest,
    FormConfigurationCreate,
    FormConfigurationResponse,
    FormConfigurationUpdate,
    FormTestRequest,
)
from services.forms import FormConfigurationService
from utils.logging import get_logger
from utils.rate_limit import RATE_LIMITS, limiter

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin/forms", tags=["Form Configurations"])


def serialize_form(form: FormConfiguration) -> Dict[str, Any]:
    """camelCase JSON document for a stored form."""
    return FormConfigurationResponse.model_validate(form).model_dump(by_alias=True, mode="json")


# =============================================================================
# Listing & Lookup
# =============================================================================

@router.get("")
@limiter.limit(RATE_LIMITS["admin"])
async def list_forms(
    request: Request,  # Required for rate limiter
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    application_type: Optional[str] = Query(None, alias="applicationType"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    is_default: Optional[bool] = Query(None, alias="isDefault"),
    search: Optional[str] = Query(None, max_length=200),
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """List form configurations, newest first."""
    service = FormConfigurationService(db)
    forms, pagination = await service.list_forms(
        page=page,
        limit=limit,
        application_type=application_type,
        is_active=is_active,
        is_default=is_default,
        search=search,
    )
    logger.info(f"Retrieved {len(forms)} form configurations ({pagination['totalCount']} total)")
    return {
        "success": True,
        "data": {
            "forms": [serialize_form(f) for f in forms],
            "pagination": pagination,
        },
    }


@router.get("/analytics/summary")
@limiter.limit(RATE_LIMITS["admin"])
async def analytics_summary(
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Form and application totals plus per-form submission counts."""
    service = FormConfigurationService(db)
    return {"success": True, "data": await service.analytics_summary()}


@router.get("/types/{application_type}/default")
async def get_default_form(
    application_type: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Get the active default form for an application type.

    Public: used by the frontend form renderer.
    """
    service = FormConfigurationService(db)
    form = await service.get_active_form_by_type(application_type)
    if not form:
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": f"No active form configuration found for application type: {application_type}",
            },
        )
    return {"success": True, "data": {"form": serialize_form(form)}}


@router.get("/{form_id}")
@limiter.limit(RATE_LIMITS["admin"])
async def get_form(
    request: Request,
    form_id: int,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Get a form configuration with its usage statistics."""
    service = FormConfigurationService(db)
    form = await service.get_form(form_id)
    usage = await service.get_form_usage(form)
    return {"success": True, "data": {"form": serialize_form(form), "usage": usage}}


# =============================================================================
# Writes
# =============================================================================

@router.post("", status_code=201)
@limiter.limit(RATE_LIMITS["admin"])
async def create_form(
    request: Request,
    data: FormConfigurationCreate,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Create a form configuration."""
    service = FormConfigurationService(db)
    form = await service.create_form(data, created_by=admin_id)
    return {
        "success": True,
        "message": "Form configuration created successfully",
        "data": {"form": serialize_form(form)},
    }


@router.put("/{form_id}")
@limiter.limit(RATE_LIMITS["admin"])
async def update_form(
    request: Request,
    form_id: int,
    data: FormConfigurationUpdate,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Partially update a form configuration."""
    service = FormConfigurationService(db)
    form = await service.update_form(form_id, data, modified_by=admin_id)
    return {
        "success": True,
        "message": "Form configuration updated successfully",
        "data": {"form": serialize_form(form)},
    }


@router.delete("/{form_id}")
@limiter.limit(RATE_LIMITS["admin"])
async def delete_form(
    request: Request,
    form_id: int,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Delete a form, or archive it when applications reference it."""
    service = FormConfigurationService(db)
    outcome = await service.delete_form(form_id)

    if outcome["archived"]:
        return {
            "success": True,
            "message": (
                f"Form configuration archived "
                f"({outcome['applicationCount']} associated applications preserved)"
            ),
            "data": {"form": serialize_form(outcome["form"])},
        }
    return {"success": True, "message": "Form configuration deleted successfully"}


@router.post("/{form_id}/clone", status_code=201)
@limiter.limit(RATE_LIMITS["admin"])
async def clone_form(
    request: Request,
    form_id: int,
    data: Optional[FormCloneRequest] = None,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Clone a form as an inactive draft."""
    data = data or FormCloneRequest()
    service = FormConfigurationService(db)
    form = await service.clone_form(
        form_id,
        created_by=admin_id,
        name=data.name,
        description=data.description,
    )
    return {
        "success": True,
        "message": "Form configuration cloned successfully",
        "data": {"form": serialize_form(form)},
    }


@router.post("/{form_id}/set-default")
@limiter.limit(RATE_LIMITS["admin"])
async def set_default_form(
    request: Request,
    form_id: int,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Make a form the default for its application type."""
    service = FormConfigurationService(db)
    form = await service.set_default(form_id, modified_by=admin_id)
    return {
        "success": True,
        "message": f"Form configuration set as default for {form.application_type} applications",
        "data": {"form": serialize_form(form)},
    }


@router.post("/{form_id}/test")
@limiter.limit(RATE_LIMITS["admin"])
async def run_form_test(
    request: Request,
    form_id: int,
    data: Optional[FormTestRequest] = None,
    db: AsyncSession = Depends(get_db),
    admin_id: str = Depends(require_admin)
):
    """Validate sample data against a form without storing anything."""
    data = data or FormTestRequest()
    service = FormConfigurationService(db)
    return {"success": True, "data": await service.test_form(form_id, data.test_data)}
