"""
Pydantic v2 model for a vehicle on a quote or order, as seen by pricing.
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from shipquote.core.exceptions import InvalidInputError


class VehicleClass(str, enum.Enum):
    SEDAN = "sedan"
    SUV = "suv"
    VAN = "van"
    PICKUP_4_DOORS = "pickup_4_doors"
    PICKUP_2_DOORS = "pickup_2_doors"


class TransportType(str, enum.Enum):
    OPEN = "open"
    ENCLOSED = "enclosed"


# Classes that carry the oversize fee unless the vehicle says otherwise
OVERSIZE_CLASSES: frozenset[str] = frozenset({
    VehicleClass.SUV.value,
    VehicleClass.VAN.value,
    VehicleClass.PICKUP_4_DOORS.value,
    VehicleClass.PICKUP_2_DOORS.value,
})


class Vehicle(BaseModel):
    """A vehicle to be priced.

    ``pricing_class`` is kept as a plain string so that classes the modifier
    set does not know about resolve to a zero modifier instead of failing
    validation.  ``base_rate`` excludes every modifier.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    make: Optional[str] = None
    model: Optional[str] = None
    pricing_class: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("pricingClass", "class", "pricing_class"),
    )
    is_inoperable: bool = False
    is_oversize: Optional[bool] = None
    base_rate: Optional[float] = None

    @field_validator("pricing_class", mode="before")
    @classmethod
    def _normalise_class(cls, value: Any) -> Any:
        if isinstance(value, VehicleClass):
            return value.value
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @property
    def label(self) -> str:
        parts = [part for part in (self.make, self.model) if part]
        return " ".join(parts) or "unknown vehicle"

    @property
    def requires_oversize(self) -> bool:
        if self.is_oversize is not None:
            return self.is_oversize
        return self.pricing_class in OVERSIZE_CLASSES


def load_vehicle(document: Union[Vehicle, Mapping[str, Any], None]) -> Vehicle:
    """Validate a vehicle taken from a quote or order document.

    Raises:
        InvalidInputError: If the vehicle is missing or malformed.
    """
    if document is None:
        raise InvalidInputError("vehicle", "is required")
    if isinstance(document, Vehicle):
        return document
    try:
        return Vehicle.model_validate(document)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "vehicle") from exc
