"""Property shape consumed by checkout."""

from pydantic import BaseModel, Field


class Property(BaseModel):
    """Rental property as returned by the property lookup."""

    id: str
    slug: str
    name: str
    amenities: list[str] = Field(default_factory=list)
    min_stay_nights: int = Field(3, ge=1)
    pet_friendly: bool = False
    base_rate_cents: int | None = Field(None, ge=0)
    address: str | None = None

    def has_amenity(self, *amenity_ids: str) -> bool:
        """Check whether any of the given amenity ids is present."""
        return any(a in self.amenities for a in amenity_ids)
