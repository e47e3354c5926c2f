"""Budget aggregation models."""

from datetime import datetime

from pydantic import BaseModel, Field

from globetrotter.app.models.common import Amount
from globetrotter.app.models.itinerary import BudgetSummaryOut


class CategoryBreakdown(BaseModel):
    """Cost of one category (flights, hotels or activities)."""

    cost: Amount
    count: int = Field(..., ge=0, description="Number of items in the category")
    percentage: float = Field(..., description="Share of the total, 0 when total is 0")


class BudgetBreakdown(BaseModel):
    """Itemized budget of an itinerary.

    Totals are summed as-is; no currency conversion is applied, ``currency``
    is the itinerary's nominal currency.
    """

    flights: CategoryBreakdown
    hotels: CategoryBreakdown
    activities: CategoryBreakdown
    total: Amount
    currency: str
    budget: Amount | None = None
    remaining: Amount | None = None
    over_budget: bool = False


class BudgetResult(BaseModel):
    """Response payload of GET /itineraries/{id}/budget."""

    summary: BudgetSummaryOut
    breakdown: BudgetBreakdown
    last_calculated: datetime
