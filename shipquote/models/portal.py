"""
Pydantic v2 model for a portal -- a tenant's pricing configuration.

Feature flags may be stored either at the top level or nested under
``options`` (the layout used by older portal documents).
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from shipquote.core.exceptions import InvalidInputError, MissingPolicyError
from shipquote.models.modifierSet import POLICY_MODEL_CONFIG, ZERO_MODIFIER, Modifier


class CustomRate(BaseModel):
    """One band of a portal's mileage rate sheet (bounds inclusive)."""

    model_config = POLICY_MODEL_CONFIG

    min: float
    max: float
    value: float

    def covers(self, miles: float) -> bool:
        return self.min <= miles <= self.max


class Portal(BaseModel):
    model_config = POLICY_MODEL_CONFIG

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: Optional[str] = None

    company_tariff: Modifier = ZERO_MODIFIER
    company_tariff_enclosed_extra: Modifier = ZERO_MODIFIER

    enable_enclosed_transport: bool = True
    enable_white_glove: bool = True
    enable_custom_rates: bool = False

    custom_rates: list[CustomRate] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _lift_options(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("options"), Mapping):
            top_level = {key: value for key, value in data.items() if key != "options"}
            return {**data["options"], **top_level}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("company_tariff", "company_tariff_enclosed_extra", mode="before")
    @classmethod
    def _null_modifier(cls, value: Any) -> Any:
        return ZERO_MODIFIER if value is None else value

    @field_validator("custom_rates", mode="before")
    @classmethod
    def _null_rates(cls, value: Any) -> Any:
        return [] if value is None else value

    def custom_base_rate(self, miles: float) -> Optional[float]:
        """Rate-sheet value for the first band covering ``miles``, if any."""
        for band in self.custom_rates:
            if band.covers(miles):
                return band.value
        return None


def load_portal(document: Union[Portal, Mapping[str, Any], None]) -> Portal:
    """Validate a stored portal document.

    Raises:
        MissingPolicyError: If ``document`` is None.
        InvalidInputError: If the document is malformed or holds a
            non-finite number.
    """
    if document is None:
        raise MissingPolicyError("portal")
    if isinstance(document, Portal):
        return document
    try:
        return Portal.model_validate(document)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "portal") from exc
