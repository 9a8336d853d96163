"""
api/routes/pricing.py
---------------------
Price preview for employees.

GET /pricing/lunch-options/{lunch_option_id}: what the caller's company
    pays and what the caller pays for a lunch option today.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.errors import FetchError
from mealstats.db.session import get_session_factory
from mealstats.dependencies import get_current_identity
from mealstats.schemas.identity import TenantIdentity
from mealstats.schemas.pricing import PricePreview
from mealstats.services.pricing_service import PricingService

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.get(
    "/lunch-options/{lunch_option_id}",
    response_model=PricePreview,
    summary="Subsidised price of a lunch option for the caller's company",
)
async def price_preview(
    lunch_option_id: str,
    identity: Annotated[TenantIdentity, Depends(get_current_identity)],
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> PricePreview:
    if not identity.company_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="no company currently assigned",
        )
    try:
        return await PricingService.preview(session_factory, lunch_option_id, identity.company_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except FetchError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
