"""Flight pricing endpoint - POST /flights/price."""

import logging

from fastapi import APIRouter

from globetrotter.app.adapters.flights import confirm_flight_price
from globetrotter.app.api.deps import ProviderDep
from globetrotter.app.models.common import ApiResponse
from globetrotter.app.models.inventory import FlightPriceRequest, FlightPricingResult

router = APIRouter(prefix="/flights", tags=["flights"])
logger = logging.getLogger(__name__)


@router.post("/price", response_model=ApiResponse[FlightPricingResult])
async def price_flight_offers(
    request: FlightPriceRequest, client: ProviderDep
) -> ApiResponse[FlightPricingResult]:
    """Confirm the current price of flight offers before booking."""
    result = await confirm_flight_price(client, request.flight_offers, request.include)
    logger.info(f"[POST /api/flights/price] offers={len(result.flight_offers)}")
    return ApiResponse(data=result, count=len(result.flight_offers))
