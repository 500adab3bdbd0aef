"""Portfolio and holding endpoints."""
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
import logging

from stockweather.api.dependencies import get_portfolio_service, get_user_id
from stockweather.api.schemas import MessageResponse
from stockweather.domain.entities import (
    Holding, HoldingCreate, HoldingUpdate, Portfolio, PortfolioCreate,
    PortfolioUpdate,
)
from stockweather.domain.exceptions import NotFoundError
from stockweather.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["portfolios"])


@router.get("/portfolios", response_model=List[Portfolio])
async def list_portfolios(
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> List[Portfolio]:
    try:
        return service.list_portfolios(user_id)
    except Exception as e:
        logger.error(f"Error fetching portfolios for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch portfolios")


@router.post("/portfolios", response_model=Portfolio)
async def create_portfolio(
    data: PortfolioCreate,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> Portfolio:
    try:
        return service.create_portfolio(user_id, data)
    except Exception as e:
        logger.error(f"Error creating portfolio: {e}")
        raise HTTPException(status_code=500, detail="Failed to create portfolio")


@router.get("/portfolios/{portfolio_id}", response_model=Portfolio)
async def get_portfolio(
    portfolio_id: UUID,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> Portfolio:
    try:
        return service.get_portfolio(user_id, portfolio_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching portfolio {portfolio_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch portfolio")


@router.put("/portfolios/{portfolio_id}", response_model=Portfolio)
async def update_portfolio(
    portfolio_id: UUID,
    data: PortfolioUpdate,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> Portfolio:
    try:
        return service.update_portfolio(user_id, portfolio_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating portfolio {portfolio_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update portfolio")


@router.delete("/portfolios/{portfolio_id}", response_model=MessageResponse)
async def delete_portfolio(
    portfolio_id: UUID,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> MessageResponse:
    try:
        service.delete_portfolio(user_id, portfolio_id)
        return MessageResponse(message="Portfolio deleted successfully")
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting portfolio {portfolio_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete portfolio")


@router.get("/portfolios/{portfolio_id}/holdings", response_model=List[Holding])
async def list_holdings(
    portfolio_id: UUID,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> List[Holding]:
    try:
        return service.list_holdings(user_id, portfolio_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching holdings for {portfolio_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch holdings")


@router.post("/portfolios/{portfolio_id}/holdings", response_model=Holding)
async def add_holding(
    portfolio_id: UUID,
    data: HoldingCreate,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> Holding:
    try:
        return service.add_holding(user_id, portfolio_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding holding to {portfolio_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add holding")


# Plain def: quote lookups block.
@router.post("/portfolios/{portfolio_id}/holdings/refresh", response_model=List[Holding])
def refresh_holdings(
    portfolio_id: UUID,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> List[Holding]:
    """Update current prices of all holdings from the quote source."""
    try:
        return service.refresh_prices(user_id, portfolio_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error refreshing prices for {portfolio_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to refresh prices")


@router.put("/holdings/{holding_id}", response_model=Holding)
async def update_holding(
    holding_id: UUID,
    data: HoldingUpdate,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> Holding:
    try:
        return service.update_holding(user_id, holding_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating holding {holding_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update holding")


@router.delete("/holdings/{holding_id}", response_model=MessageResponse)
async def delete_holding(
    holding_id: UUID,
    user_id: str = Depends(get_user_id),
    service: PortfolioService = Depends(get_portfolio_service)
) -> MessageResponse:
    try:
        service.delete_holding(user_id, holding_id)
        return MessageResponse(message="Holding deleted successfully")
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting holding {holding_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete holding")
