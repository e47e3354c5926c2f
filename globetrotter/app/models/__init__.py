"""Models package - re-exports for convenience."""

from globetrotter.app.models.budget import BudgetBreakdown, BudgetResult, CategoryBreakdown
from globetrotter.app.models.common import (
    Amount,
    ApiResponse,
    GeoCode,
    ItineraryStatus,
    MessageResponse,
    RecordModel,
)
from globetrotter.app.models.inventory import (
    ActivityListing,
    City,
    FlightPriceRequest,
    FlightPricingResult,
    HotelAvailability,
    HotelListing,
    HotelOfferDetail,
    HotelOffersRequest,
    PricedFlightOffer,
)
from globetrotter.app.models.itinerary import (
    ActivityCreate,
    ActivityOut,
    BudgetSummaryOut,
    FlightCreate,
    FlightOut,
    HotelCreate,
    HotelOut,
    ItineraryCreate,
    ItineraryOut,
    ItineraryUpdate,
    OwnerOut,
    StopCreate,
    StopOut,
    StopUpdate,
)
from globetrotter.app.models.user import UserCreate, UserOut, UserWithItineraries

__all__ = [
    # Common
    "Amount",
    "ApiResponse",
    "GeoCode",
    "ItineraryStatus",
    "MessageResponse",
    "RecordModel",
    # Itinerary
    "ItineraryCreate",
    "ItineraryUpdate",
    "ItineraryOut",
    "OwnerOut",
    "StopCreate",
    "StopUpdate",
    "StopOut",
    "ActivityCreate",
    "ActivityOut",
    "HotelCreate",
    "HotelOut",
    "FlightCreate",
    "FlightOut",
    "BudgetSummaryOut",
    # Budget
    "CategoryBreakdown",
    "BudgetBreakdown",
    "BudgetResult",
    # Users
    "UserCreate",
    "UserOut",
    "UserWithItineraries",
    # Inventory
    "City",
    "ActivityListing",
    "HotelListing",
    "HotelAvailability",
    "HotelOfferDetail",
    "HotelOffersRequest",
    "PricedFlightOffer",
    "FlightPricingResult",
    "FlightPriceRequest",
]
