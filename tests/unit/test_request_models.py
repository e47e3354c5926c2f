"""Tests for request parsing and validation error mapping."""

from decimal import Decimal

import pytest
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from globetrotter.app.errors import InvalidField, MissingRequiredField
from globetrotter.app.main import validation_error_from
from globetrotter.app.models.inventory import HotelOffersRequest
from globetrotter.app.models.itinerary import (
    ActivityCreate,
    HotelCreate,
    ItineraryUpdate,
    StopUpdate,
)

HOTEL = {
    "provider_hotel_id": "HLPAR001",
    "hotel_name": "Le Marais",
    "check_in_date": "2026-05-01",
    "check_out_date": "2026-05-03",
    "price_total": "300.50",
    "currency": "EUR",
}


def _request_error(model: type, body: dict) -> RequestValidationError:
    """Re-raise a model's validation errors the way FastAPI reports them."""
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(body)
    errors = [{**error, "loc": ("body", *error["loc"])} for error in exc_info.value.errors()]
    return RequestValidationError(errors)


def test_hotel_numeric_strings_are_parsed_as_decimals() -> None:
    hotel = HotelCreate.model_validate(HOTEL)

    assert hotel.price_total == Decimal("300.50")
    assert hotel.nights == 1


def test_activity_numerics_default_to_null() -> None:
    activity = ActivityCreate.model_validate({"provider_activity_id": "A1", "name": "Tour"})

    assert activity.price is None
    assert activity.rating is None
    assert activity.pictures == []


def test_malformed_price_is_invalid_field() -> None:
    error = validation_error_from(
        _request_error(ActivityCreate, {"provider_activity_id": "A1", "name": "Tour", "price": "abc"})
    )

    assert isinstance(error, InvalidField)
    assert error.field == "price"
    assert error.status_code == 400


def test_missing_hotel_fields_are_all_reported() -> None:
    body = {k: v for k, v in HOTEL.items() if k not in ("price_total", "currency")}

    error = validation_error_from(_request_error(HotelCreate, body))

    assert isinstance(error, MissingRequiredField)
    assert sorted(error.fields) == ["currency", "price_total"]
    assert error.to_body()["required"] == error.fields


def test_missing_field_wins_over_invalid_field() -> None:
    error = validation_error_from(
        _request_error(ActivityCreate, {"provider_activity_id": "A1", "rating": "great"})
    )

    assert isinstance(error, MissingRequiredField)
    assert error.fields == ["name"]


def test_update_rejects_explicit_null_for_required_columns() -> None:
    with pytest.raises(ValidationError):
        ItineraryUpdate.model_validate({"name": None})
    with pytest.raises(ValidationError):
        StopUpdate.model_validate({"sequence": None})


def test_update_tracks_only_provided_fields() -> None:
    update = StopUpdate.model_validate({"notes": "late check-in"})

    assert update.model_dump(exclude_unset=True) == {"notes": "late check-in"}


def test_hotel_offers_request_rejects_reversed_dates() -> None:
    with pytest.raises(ValidationError, match="check_out_date must be after check_in_date"):
        HotelOffersRequest.model_validate(
            {
                "hotel_ids": ["HLPAR001"],
                "check_in_date": "2026-05-03",
                "check_out_date": "2026-05-01",
            }
        )
