"""Re-pricing of booked hotels against live provider offers."""

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from globetrotter.app.adapters.amadeus import AmadeusClient
from globetrotter.app.adapters.hotels import get_hotel_offers
from globetrotter.app.db.repositories import ItineraryStore
from globetrotter.app.errors import NotFound, ValidationFailed
from globetrotter.app.models.itinerary import HotelOut

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _to_cents(amount: Decimal | None) -> Decimal | None:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP) if amount is not None else None


async def refresh_stop_hotel_pricing(
    store: ItineraryStore,
    client: AmadeusClient,
    itinerary_id: UUID,
    stop_id: UUID,
) -> list[HotelOut]:
    """Refresh every hotel of a stop with the provider's current best offer.

    Uses the stop's dates, falling back to today and tomorrow. Hotels the
    provider returns no priced offer for keep their stored price.

    Returns:
        The hotels that were updated

    Raises:
        NotFound: stop does not exist in this itinerary
        ValidationFailed: the stop has no hotels
    """
    stop = await store.get_stop(stop_id)
    if stop is None or stop.itinerary_id != itinerary_id:
        raise NotFound("Stop")
    if not stop.hotels:
        raise ValidationFailed("No hotels added to this stop")

    check_in = stop.check_in_date or date.today()
    check_out = stop.check_out_date or check_in + timedelta(days=1)
    hotel_ids = list(dict.fromkeys(hotel.provider_hotel_id for hotel in stop.hotels))

    logger.info(f"Refreshing pricing for {len(stop.hotels)} hotel(s) stop_id={stop_id}")
    availability = await get_hotel_offers(client, hotel_ids, check_in, check_out)

    updated: list[HotelOut] = []
    for entry in availability:
        if not entry.offers:
            continue
        best = entry.offers[0]
        if best.price.total is None:
            continue

        for hotel in stop.hotels:
            if hotel.provider_hotel_id != entry.hotel.hotel_id:
                continue
            record = await store.update_hotel(
                hotel.hotel_id,
                {
                    "offer_id": best.id,
                    "price_base": _to_cents(best.price.base),
                    "price_total": _to_cents(best.price.total),
                    "currency": best.price.currency or hotel.currency,
                },
            )
            if record is not None:
                updated.append(HotelOut.model_validate(record))

    logger.info(f"Refreshed pricing for {len(updated)} hotel(s) stop_id={stop_id}")
    return updated
