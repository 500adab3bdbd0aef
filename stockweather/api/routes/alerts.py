"""Alert preference endpoints."""
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
import logging

from stockweather.api.dependencies import get_alert_service, get_user_id
from stockweather.api.schemas import MessageResponse
from stockweather.domain.entities import AlertCreate, AlertUpdate, UserAlert
from stockweather.domain.exceptions import NotFoundError
from stockweather.services.alert_service import AlertService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/alerts", tags=["alerts"])


@router.get("", response_model=List[UserAlert])
async def list_alerts(
    user_id: str = Depends(get_user_id),
    service: AlertService = Depends(get_alert_service)
) -> List[UserAlert]:
    try:
        return service.list_alerts(user_id)
    except Exception as e:
        logger.error(f"Error fetching alerts for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch alerts")


@router.post("", response_model=UserAlert)
async def create_alert(
    data: AlertCreate,
    user_id: str = Depends(get_user_id),
    service: AlertService = Depends(get_alert_service)
) -> UserAlert:
    try:
        return service.create_alert(user_id, data)
    except Exception as e:
        logger.error(f"Error creating alert: {e}")
        raise HTTPException(status_code=500, detail="Failed to create alert")


@router.put("/{alert_id}", response_model=UserAlert)
async def update_alert(
    alert_id: UUID,
    data: AlertUpdate,
    user_id: str = Depends(get_user_id),
    service: AlertService = Depends(get_alert_service)
) -> UserAlert:
    try:
        return service.update_alert(user_id, alert_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating alert {alert_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update alert")


@router.delete("/{alert_id}", response_model=MessageResponse)
async def delete_alert(
    alert_id: UUID,
    user_id: str = Depends(get_user_id),
    service: AlertService = Depends(get_alert_service)
) -> MessageResponse:
    try:
        service.delete_alert(user_id, alert_id)
        return MessageResponse(message="Alert deleted successfully")
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting alert {alert_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete alert")
