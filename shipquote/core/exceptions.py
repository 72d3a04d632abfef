"""
Pricing exceptions shared by the engine and its callers.

``InvalidInputError`` is fatal to a single vehicle's calculation; callers
skip the vehicle or abort the batch.  ``MissingPolicyError`` means a policy
document was not supplied and pricing must not proceed with zero values.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError


class PricingError(Exception):
    """Base class for all pricing failures."""


class InvalidInputError(PricingError, ValueError):
    """Raised when a pricing input is missing, negative or not a finite number."""

    def __init__(self, field: str, reason: str, vehicle: Optional[str] = None) -> None:
        self.field = field
        self.reason = reason
        self.vehicle = vehicle
        target = f" for vehicle '{vehicle}'" if vehicle else ""
        super().__init__(f"Invalid {field}{target}: {reason}")

    @classmethod
    def from_validation_error(
        cls,
        exc: ValidationError,
        document: str,
        vehicle: Optional[str] = None,
    ) -> InvalidInputError:
        """Name the first failing field of a policy or vehicle document."""
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        field = f"{document} {location}" if location else document
        return cls(field, error["msg"], vehicle)


class MissingPolicyError(PricingError):
    """Raised when the modifier set or portal is absent."""

    def __init__(self, policy: str) -> None:
        self.policy = policy
        super().__init__(f"A {policy} is required to calculate pricing.")
