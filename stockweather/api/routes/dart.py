"""DART disclosure endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from stockweather.api.dependencies import get_disclosure_service
from stockweather.domain.entities import Disclosure
from stockweather.domain.exceptions import DisclosureSourceError
from stockweather.services.disclosure_service import DisclosureService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dart", tags=["dart"])


@router.get("/recent", response_model=List[Disclosure])
async def get_recent_disclosures(
    limit: int = 20,
    service: DisclosureService = Depends(get_disclosure_service)
) -> List[Disclosure]:
    """Recent disclosures, newest first."""
    try:
        return await service.get_recent_disclosures(limit)
    except DisclosureSourceError as e:
        logger.error(f"DART unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching recent disclosures: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch DART disclosures")


@router.get("/stock/{code}", response_model=List[Disclosure])
async def get_stock_disclosures(
    code: str,
    limit: int = 10,
    service: DisclosureService = Depends(get_disclosure_service)
) -> List[Disclosure]:
    try:
        return await service.get_company_disclosures(code, limit)
    except DisclosureSourceError as e:
        logger.error(f"DART unavailable for {code}: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching disclosures for {code}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch stock disclosures")
