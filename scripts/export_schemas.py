"""Export JSON schemas of the public API payloads."""

import json
from pathlib import Path

from pydantic import BaseModel

from globetrotter.app.models import (
    BudgetResult,
    City,
    FlightPricingResult,
    HotelAvailability,
    ItineraryOut,
    UserWithItineraries,
)

EXPORTED_MODELS: list[type[BaseModel]] = [
    ItineraryOut,
    BudgetResult,
    UserWithItineraries,
    City,
    HotelAvailability,
    FlightPricingResult,
]


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in EXPORTED_MODELS:
        schema = model.model_json_schema(mode="serialization")
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {model.__name__} schema to {path}")


if __name__ == "__main__":
    main()
