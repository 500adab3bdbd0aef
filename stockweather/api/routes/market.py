"""Market weather endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
import logging

from stockweather.api.dependencies import get_market_weather_service, get_search_service
from stockweather.api.schemas import MarketWeatherSummaryResponse
from stockweather.domain.entities import MarketAnalysis, SearchResult, SectorWeather
from stockweather.services.market_weather_service import MarketWeatherService
from stockweather.services.search_service import SearchService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/market", tags=["market"])


@router.get("/weather", response_model=MarketAnalysis)
async def get_market_weather(
    service: MarketWeatherService = Depends(get_market_weather_service)
) -> MarketAnalysis:
    """Full market analysis: market, per-security and sector weather."""
    try:
        return await service.generate_market_analysis()
    except Exception as e:
        logger.error(f"Error fetching market weather: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch market weather data")


@router.get("/weather/summary", response_model=MarketWeatherSummaryResponse)
async def get_market_weather_summary(
    service: MarketWeatherService = Depends(get_market_weather_service)
) -> MarketWeatherSummaryResponse:
    try:
        analysis = await service.generate_market_analysis()
        return MarketWeatherSummaryResponse(
            market_weather=analysis.market_weather,
            top_stocks_count=len(analysis.stocks),
            sectors_count=len(analysis.sectors),
            insights=analysis.insights[:2],
        )
    except Exception as e:
        logger.error(f"Error fetching market weather summary: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch market weather summary")


@router.get("/sectors", response_model=List[SectorWeather])
async def get_sectors(
    service: MarketWeatherService = Depends(get_market_weather_service)
) -> List[SectorWeather]:
    try:
        analysis = await service.generate_market_analysis()
        return analysis.sectors
    except Exception as e:
        logger.error(f"Error fetching sector analysis: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch sector analysis")


@router.get("/stocks/filter", response_model=List[SearchResult])
async def filter_stocks(
    market: Optional[str] = None,
    sector: Optional[str] = None,
    limit: int = 20,
    service: SearchService = Depends(get_search_service)
) -> List[SearchResult]:
    """Active securities by market and sector, market cap descending."""
    try:
        return service.filter_securities(market=market, sector=sector, limit=limit)
    except Exception as e:
        logger.error(f"Error filtering stocks: {e}")
        raise HTTPException(status_code=500, detail="Failed to filter stocks")
