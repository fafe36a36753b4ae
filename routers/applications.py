"""
Application Router Module

Public submission endpoint. Bodies may be flat or nested under
personalInfo / businessInfo / requirements; both are validated against
the active form for the body's applicationType.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.schemas import ApplicationResponse
from services.forms import submit_application
from utils.logging import get_logger
from utils.rate_limit import RATE_LIMITS, limiter

logger = get_logger(__name__)

router = APIRouter(prefix="/api/applications", tags=["Applications"])


@router.post("", status_code=201)
@limiter.limit(RATE_LIMITS["submit"])
async def create_application(
    request: Request,  # Required for rate limiter
    body: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit an application.

    Returns 400 with every validation problem when the submission does not
    satisfy its form, 500 when the validation system itself fails.
    """
    application = await submit_application(db, body)
    data = ApplicationResponse.model_validate(application).model_dump(by_alias=True, mode="json")

    return {
        "success": True,
        "message": "Application submitted successfully",
        "data": {
            "application": data,
            "validationWarnings": data["validationMetadata"].get("validationWarnings", []),
        },
    }
