"""Add-on and trip-protection models."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from checkout.app.models.common import PriceType


class AddonCatalogEntry(BaseModel):
    """Purchasable add-on as listed in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    price_cents: int = Field(..., ge=0)
    price_type: PriceType = PriceType.flat
    category: Literal["convenience", "experience", "gear"] = "convenience"
    popular: bool = False

    @property
    def per_night(self) -> bool:
        """Whether the price is multiplied by the number of nights."""
        return self.price_type in (PriceType.per_night, PriceType.per_day)


class AddonSelection(BaseModel):
    """A guest's pick from the add-on catalog."""

    model_config = ConfigDict(frozen=True)

    addon_id: str
    quantity: int = Field(1, ge=1)


class AddonLine(BaseModel):
    """Resolved add-on line for summaries."""

    addon_id: str
    name: str
    quantity: int
    unit_price_cents: int
    nights_applied: int
    line_total_cents: int


class InsurancePlan(BaseModel):
    """Trip protection plan priced as a fraction of the trip total."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    premium_rate: Decimal = Field(..., ge=0, le=1)
    coverage: tuple[str, ...] = ()
    max_coverage_cents: int | None = None
