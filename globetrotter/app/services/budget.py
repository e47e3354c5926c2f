"""Budget aggregation for itineraries.

Costs are summed as stored: line items are not converted between
currencies, and the itinerary's nominal currency is reported alongside.
"""

import logging
from decimal import Decimal
from uuid import UUID

from globetrotter.app.db.repositories import ItineraryRecord, ItineraryStore
from globetrotter.app.errors import GlobeTrotterError, NotFound
from globetrotter.app.models.budget import BudgetBreakdown, BudgetResult, CategoryBreakdown
from globetrotter.app.models.itinerary import BudgetSummaryOut
from globetrotter.app.utils.metrics import budget_calculations_total

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _percentage(cost: Decimal, total: Decimal) -> float:
    if total == 0:
        return 0.0
    return float(cost / total * 100)


def compute_breakdown(itinerary: ItineraryRecord) -> BudgetBreakdown:
    """Compute the cost breakdown of a fully loaded itinerary.

    Pure: reads the record graph and never touches the store.
    """
    hotels = [hotel for stop in itinerary.stops for hotel in stop.hotels]
    activities = [activity for stop in itinerary.stops for activity in stop.activities]

    flights_cost = sum((flight.price_total for flight in itinerary.flights), ZERO)
    hotels_cost = sum((hotel.price_total for hotel in hotels), ZERO)
    activities_cost = sum(
        (activity.price for activity in activities if activity.price is not None), ZERO
    )
    total = flights_cost + hotels_cost + activities_cost

    budget = itinerary.total_budget
    return BudgetBreakdown(
        flights=CategoryBreakdown(
            cost=flights_cost,
            count=len(itinerary.flights),
            percentage=_percentage(flights_cost, total),
        ),
        hotels=CategoryBreakdown(
            cost=hotels_cost, count=len(hotels), percentage=_percentage(hotels_cost, total)
        ),
        activities=CategoryBreakdown(
            cost=activities_cost,
            count=len(activities),
            percentage=_percentage(activities_cost, total),
        ),
        total=total,
        currency=itinerary.currency,
        budget=budget,
        remaining=budget - total if budget is not None else None,
        over_budget=budget is not None and total > budget,
    )


async def calculate_budget(store: ItineraryStore, itinerary_id: UUID) -> BudgetResult:
    """Compute the itinerary's budget and persist it as its budget summary.

    Exactly one write per call; concurrent calls race on the upsert and the
    later write wins.

    Raises:
        NotFound: itinerary does not exist
        InternalError: the summary could not be persisted
    """
    itinerary = await store.get_itinerary(itinerary_id)
    if itinerary is None:
        budget_calculations_total.labels(outcome="not_found").inc()
        raise NotFound("Itinerary")

    breakdown = compute_breakdown(itinerary)

    try:
        summary = await store.upsert_budget_summary(
            itinerary_id,
            flights_cost=breakdown.flights.cost,
            hotels_cost=breakdown.hotels.cost,
            activities_cost=breakdown.activities.cost,
            total_cost=breakdown.total,
            currency=breakdown.currency,
        )
    except GlobeTrotterError:
        budget_calculations_total.labels(outcome="error").inc()
        raise

    budget_calculations_total.labels(outcome="success").inc()
    logger.info(
        f"Budget calculated itinerary_id={itinerary_id} total={breakdown.total} "
        f"over_budget={breakdown.over_budget}"
    )
    return BudgetResult(
        summary=BudgetSummaryOut.model_validate(summary),
        breakdown=breakdown,
        last_calculated=summary.last_calculated,
    )
