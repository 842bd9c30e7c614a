from __future__ import annotations

import logging
from itertools import count

from pydantic import BaseModel, ConfigDict

from domain.conversion import (
    ConversionError,
    ConversionRequest,
    ConversionResult,
    ConversionStatus,
)

from .rate_converter import RateConverter

logger = logging.getLogger(__name__)


class ConverterState(BaseModel):
    """Snapshot handed to the presentation layer after every transition."""

    model_config = ConfigDict(frozen=True)

    status: ConversionStatus = ConversionStatus.IDLE
    request_token: int = 0
    result: ConversionResult | None = None
    error_kind: str | None = None
    message: str | None = None


class ConverterSession:
    """Drives ``Idle -> Fetching -> Succeeded | Failed`` for successive user actions.

    Every ``begin`` issues a new token. A ``complete`` for a token that is no
    longer the latest is dropped, so an overlapping slow request can never
    overwrite the outcome of a newer one.
    """

    def __init__(self, converter: RateConverter) -> None:
        self.converter = converter
        self._tokens = count(1)
        self._state = ConverterState()

    @property
    def state(self) -> ConverterState:
        return self._state

    def begin(
        self, amount_text: str | None, source_id: str | None, target_code: str | None
    ) -> tuple[ConverterState, ConversionRequest | None]:
        token = next(self._tokens)
        try:
            request = ConversionRequest.parse(amount_text, source_id, target_code)
        except ConversionError as exc:
            self._state = self._failed(token, exc)
            return self._state, None

        self._state = ConverterState(status=ConversionStatus.FETCHING, request_token=token)
        return self._state, request

    def complete(self, token: int, request: ConversionRequest) -> ConverterState:
        try:
            result = self.converter.convert(request)
        except ConversionError as exc:
            outcome = self._failed(token, exc)
        else:
            outcome = ConverterState(status=ConversionStatus.SUCCEEDED, request_token=token, result=result)

        if token != self._state.request_token:
            logger.debug("Discarding stale conversion outcome for token %d (latest %d)", token, self._state.request_token)
            return self._state
        self._state = outcome
        return outcome

    def submit(self, amount_text: str | None, source_id: str | None, target_code: str | None) -> ConverterState:
        state, request = self.begin(amount_text, source_id, target_code)
        if request is None:
            return state
        return self.complete(state.request_token, request)

    @staticmethod
    def _failed(token: int, exc: ConversionError) -> ConverterState:
        return ConverterState(
            status=ConversionStatus.FAILED,
            request_token=token,
            error_kind=exc.kind,
            message=exc.user_message,
        )


__all__ = ["ConverterSession", "ConverterState"]
