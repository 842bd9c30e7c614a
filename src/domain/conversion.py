from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from utils.formatting import format_amount

INVALID_INPUT_MESSAGE = "Please fill in amount, source and target with a valid positive number."
CONVERSION_FAILED_MESSAGE = "Conversion failed. Please check your internet connection and try again."


class ConversionError(Exception):
    kind = "conversion_error"
    user_message = CONVERSION_FAILED_MESSAGE


class InvalidInputError(ConversionError):
    """Bad amount or missing selection. Raised before any network access."""

    kind = "invalid_input"
    user_message = INVALID_INPUT_MESSAGE


class ProviderUnreachableError(ConversionError):
    """Transport, status or payload failure talking to the price provider."""

    kind = "provider_unreachable"


class RateUnavailableError(ConversionError):
    """Provider answered but has no usable quote for the requested pair."""

    kind = "rate_unavailable"


class ConversionPath(StrEnum):
    DIRECT = "direct"
    BRIDGED = "bridged"


class ConversionStatus(StrEnum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


def parse_amount(text: str | None) -> Decimal:
    """Parse user input into a positive decimal, accepting ``,`` as the decimal separator."""
    normalized = (text or "").strip().replace(",", ".")
    if not normalized:
        raise InvalidInputError("amount must be provided")
    try:
        amount = Decimal(normalized)
    except InvalidOperation as exc:
        raise InvalidInputError(f"amount {text!r} is not a number") from exc
    if not amount.is_finite() or amount <= 0:
        raise InvalidInputError(f"amount must be a positive number, got {text!r}")
    return amount


class ConversionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_id: str
    target_code: str
    amount: Decimal

    @model_validator(mode="after")
    def _validate_fields(self) -> ConversionRequest:
        if not self.source_id:
            raise ValueError("source_id must be non-empty")
        if not self.target_code:
            raise ValueError("target_code must be non-empty")
        if not self.amount.is_finite() or self.amount <= 0:
            raise ValueError("amount must be > 0")
        return self

    @classmethod
    def parse(cls, amount_text: str | None, source_id: str | None, target_code: str | None) -> ConversionRequest:
        source = (source_id or "").strip()
        target = (target_code or "").strip().lower()
        if not source or not target:
            raise InvalidInputError("source and target must both be selected")
        amount = parse_amount(amount_text)
        try:
            return cls(source_id=source, target_code=target, amount=amount)
        except ValidationError as exc:
            raise InvalidInputError(str(exc)) from exc


class ConversionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Decimal
    target_code: str
    rate: Decimal
    path: ConversionPath

    def display(self) -> str:
        return f"{format_amount(self.value)} {self.target_code.upper()}"


__all__ = [
    "CONVERSION_FAILED_MESSAGE",
    "INVALID_INPUT_MESSAGE",
    "ConversionError",
    "ConversionPath",
    "ConversionRequest",
    "ConversionResult",
    "ConversionStatus",
    "InvalidInputError",
    "ProviderUnreachableError",
    "RateUnavailableError",
    "parse_amount",
]
