"""Nearby grocery store search."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from app.api.dependencies import get_session
from app.models.recipe import Store
from app.services.kitchen_session import KitchenSession
from app.services.store_locator import position_from_report

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stores", tags=["stores"])


class NearbyStoresRequest(BaseModel):
    """
    What the browser's geolocation call produced: either coordinates or an
    error code (permission_denied, unavailable, timeout, unsupported).
    """

    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    error: Optional[str] = None


class NearbyStoresResponse(BaseModel):
    stores: List[Store]


@router.get("/nearby", response_model=NearbyStoresResponse)
async def last_nearby_stores(session: KitchenSession = Depends(get_session)) -> NearbyStoresResponse:
    """Result of the most recent search."""
    return NearbyStoresResponse(stores=session.store_locator.stores)


@router.post("/nearby", response_model=NearbyStoresResponse)
async def find_nearby_stores(
    request: Request,
    body: NearbyStoresRequest,
    session: KitchenSession = Depends(get_session),
) -> NearbyStoresResponse:
    """Search grocery stores and markets around the reported position."""
    logger.info(
        "Route /stores/nearby called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/stores/nearby",
            "params": {"has_position": body.latitude is not None, "error": body.error},
        },
    )
    source = position_from_report(body.latitude, body.longitude, body.error)
    stores = await session.store_locator.locate(source)
    return NearbyStoresResponse(stores=stores)
