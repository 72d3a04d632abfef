"""
Pydantic v2 models for modifier sets -- the platform or tenant pricing policy.

Documents are stored with camelCase keys; every model also accepts the
snake_case field names.  Two schema versions exist:

- Version 1 (``LegacyModifierSet``) stores the portal-scope commission under
  ``fixedCommission``.
- Version 2 (``ModifierSet``) stores it under ``portalWideCommission``.

``load_modifier_set`` normalises either version into ``ModifierSet`` at load
time, so pricing code only ever reads ``portal_wide_commission``.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from shipquote.core.exceptions import InvalidInputError, MissingPolicyError


POLICY_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
    allow_inf_nan=False,
)


class ServiceLevelOption(str, enum.Enum):
    ONE_DAY = "1"
    THREE_DAY = "3"
    FIVE_DAY = "5"
    SEVEN_DAY = "7"
    WHITE_GLOVE = "whiteGlove"


class Modifier(BaseModel):
    """A ``{flat, percent}`` adjustment.  ``percent`` is a fraction (0.05 = 5%)."""

    model_config = POLICY_MODEL_CONFIG

    flat: float = 0.0
    percent: float = 0.0

    @field_validator("flat", "percent", mode="before")
    @classmethod
    def _null_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @property
    def is_zero(self) -> bool:
        return self.flat == 0 and self.percent == 0


ZERO_MODIFIER = Modifier()


class ServiceLevelValue(BaseModel):
    """Explicit final price for one service level."""

    model_config = POLICY_MODEL_CONFIG

    service_level: ServiceLevelOption = Field(
        validation_alias=AliasChoices("serviceLevel", "serviceLevelOption", "service_level"),
    )
    value: float = 0.0

    @field_validator("service_level", mode="before")
    @classmethod
    def _numeric_level(cls, value: Any) -> Any:
        # Day counts are sometimes stored as numbers.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("value", mode="before")
    @classmethod
    def _null_value(cls, value: Any) -> Any:
        return 0.0 if value is None else value


SCALAR_MODIFIERS = (
    "inoperable",
    "oversize",
    "global_discount",
    "irr",
    "fuel",
    "enclosed_flat",
    "enclosed_percent",
    "commission",
    "company_tariff_discount",
    "company_tariff_enclosed_fee",
)


class _ModifierSetFields(BaseModel):
    """Fields shared by every schema version."""

    model_config = POLICY_MODEL_CONFIG

    portal_id: Optional[str] = None
    is_global: bool = False

    inoperable: Modifier = ZERO_MODIFIER
    oversize: Modifier = ZERO_MODIFIER
    global_discount: Modifier = ZERO_MODIFIER
    irr: Modifier = ZERO_MODIFIER
    fuel: Modifier = ZERO_MODIFIER
    enclosed_flat: Modifier = ZERO_MODIFIER
    enclosed_percent: Modifier = ZERO_MODIFIER
    commission: Modifier = ZERO_MODIFIER
    company_tariff_discount: Modifier = ZERO_MODIFIER
    company_tariff_enclosed_fee: Modifier = ZERO_MODIFIER

    routes: dict[str, Modifier] = Field(default_factory=dict)
    states: dict[str, Modifier] = Field(default_factory=dict)
    vehicles: dict[str, Modifier] = Field(default_factory=dict)

    service_levels: list[ServiceLevelValue] = Field(default_factory=list)

    @field_validator("portal_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator(*SCALAR_MODIFIERS, mode="before")
    @classmethod
    def _null_modifier(cls, value: Any) -> Any:
        return ZERO_MODIFIER if value is None else value

    @field_validator("routes", "states", "vehicles", mode="before")
    @classmethod
    def _null_mapping(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("service_levels", mode="before")
    @classmethod
    def _null_levels(cls, value: Any) -> Any:
        return [] if value is None else value


class ModifierSet(_ModifierSetFields):
    """Current (version 2) modifier set."""

    schema_version: Literal[2] = 2
    portal_wide_commission: Optional[Modifier] = None

    @property
    def effective_commission(self) -> Modifier:
        """Portal-scope commission when configured, otherwise the global one."""
        if self.portal_wide_commission is not None:
            return self.portal_wide_commission
        return self.commission


class LegacyModifierSet(_ModifierSetFields):
    """Version 1 modifier set, carrying ``fixedCommission``."""

    schema_version: Literal[1] = 1
    fixed_commission: Optional[Modifier] = None

    def upgrade(self) -> ModifierSet:
        data = self.model_dump(exclude={"schema_version", "fixed_commission"})
        data["portal_wide_commission"] = self.fixed_commission
        return ModifierSet.model_validate(data)


AnyModifierSet = Union[ModifierSet, LegacyModifierSet]

_LEGACY_KEYS = ("fixedCommission", "fixed_commission")
_CURRENT_KEYS = ("portalWideCommission", "portal_wide_commission")
_VERSION_KEYS = ("schemaVersion", "schema_version")


def _is_legacy_document(document: Mapping[str, Any]) -> bool:
    # The commission keys decide; the version tag only matters without them.
    has_legacy = any(document.get(key) is not None for key in _LEGACY_KEYS)
    has_current = any(document.get(key) is not None for key in _CURRENT_KEYS)
    if has_legacy or has_current:
        return has_legacy and not has_current
    return any(str(document.get(key)) == "1" for key in _VERSION_KEYS)


def load_modifier_set(document: Union[AnyModifierSet, Mapping[str, Any], None]) -> ModifierSet:
    """Validate a stored modifier set and normalise it to the current schema.

    Raises:
        MissingPolicyError: If ``document`` is None.
        InvalidInputError: If the document is malformed or holds a
            non-finite number.
    """
    if document is None:
        raise MissingPolicyError("modifier set")
    if isinstance(document, ModifierSet):
        return document
    if isinstance(document, LegacyModifierSet):
        return document.upgrade()

    legacy = _is_legacy_document(document)
    # The version tag is implied by the keys. When both commission names are
    # present the current one wins and the legacy one is dropped.
    dropped = _VERSION_KEYS if legacy else _VERSION_KEYS + _LEGACY_KEYS
    data = {key: value for key, value in document.items() if key not in dropped}

    try:
        if legacy:
            return LegacyModifierSet.model_validate(data).upgrade()
        return ModifierSet.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "modifier set") from exc
