"""Security search and quote endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
import logging

from stockweather.api.dependencies import (
    get_catalog_service, get_quote_source, get_search_service,
)
from stockweather.domain.entities import Quote, SearchResult, Security
from stockweather.domain.interfaces import QuoteSource
from stockweather.services.catalog_service import CatalogService
from stockweather.services.search_service import SearchService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/stocks", tags=["stocks"])


@router.get("/search", response_model=List[SearchResult])
async def search_stocks(
    q: Optional[str] = None,
    limit: int = 20,
    service: SearchService = Depends(get_search_service)
) -> List[SearchResult]:
    """Search by name, English name, code, market, sector, industry or initials."""
    if not q:
        raise HTTPException(status_code=400, detail="Query parameter is required")
    try:
        return service.search(q, limit)
    except Exception as e:
        logger.error(f"Error searching stocks for {q!r}: {e}")
        raise HTTPException(status_code=500, detail="Failed to search stocks")


@router.get("/all", response_model=List[SearchResult])
async def get_all_stocks(
    service: SearchService = Depends(get_search_service)
) -> List[SearchResult]:
    """All active securities, market cap descending."""
    try:
        return service.list_all()
    except Exception as e:
        logger.error(f"Error fetching all stocks: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch all stocks")


# Plain def: yfinance blocks, so FastAPI runs this in its threadpool.
@router.get("/{code}/quote", response_model=Quote)
def get_quote(
    code: str,
    catalog: CatalogService = Depends(get_catalog_service),
    quotes: QuoteSource = Depends(get_quote_source)
) -> Quote:
    try:
        security = catalog.get_by_code(code) or Security(code=code, name=code)
        quote = quotes.get_quote(security)
        if not quote:
            raise HTTPException(status_code=404, detail=f"No quote found for {code}")
        return quote
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching quote for {code}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch stock quote")
