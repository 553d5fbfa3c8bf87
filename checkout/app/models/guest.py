"""Guest details and party composition."""

import re

from pydantic import BaseModel, Field

# Same shape the booking form accepts (case-insensitive).
EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)


class Address(BaseModel):
    """Postal address."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None


class GuestInfo(BaseModel):
    """Primary guest contact details.

    Fields default to empty so a partially-filled form can be stored on the
    draft; completeness is checked by the guests-step verifier.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str | None = None
    address: Address | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PartyComposition(BaseModel):
    """Who is travelling."""

    adults: int = Field(2, ge=1)
    children: int = Field(0, ge=0)
    pets: int = Field(0, ge=0)

    @property
    def guest_count(self) -> int:
        return self.adults + self.children
