from __future__ import annotations

from typing import NewType

from pydantic import BaseModel, ConfigDict, model_validator

AssetId = NewType("AssetId", str)
FiatCode = NewType("FiatCode", str)


class Asset(BaseModel):
    """A priceable catalog entry. Only ``id`` is ever sent to the price provider."""

    model_config = ConfigDict(frozen=True)

    id: AssetId
    symbol: str
    name: str = ""

    @model_validator(mode="after")
    def _validate_fields(self) -> Asset:
        if not self.id:
            raise ValueError("Asset.id must be non-empty")
        if not self.symbol:
            raise ValueError("Asset.symbol must be non-empty")
        return self

    @property
    def label(self) -> str:
        return f"{self.symbol.upper()} — {self.name}"


__all__ = ["Asset", "AssetId", "FiatCode"]
