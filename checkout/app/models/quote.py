"""Stay dates and the authoritative pricing quote."""

from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class DateRange(BaseModel):
    """Check-in/check-out pair. Check-out is exclusive."""

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date

    @field_validator("check_out")
    @classmethod
    def validate_check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        """Ensure check_out > check_in."""
        if "check_in" in info.data and v <= info.data["check_in"]:
            raise ValueError("check_out must be after check_in")
        return v

    @property
    def nights(self) -> int:
        """Whole days between check-in and check-out."""
        return (self.check_out - self.check_in).days


class NightlyRate(BaseModel):
    """Price of a single night."""

    model_config = ConfigDict(frozen=True)

    date: date
    price_cents: int = Field(..., ge=0)


class PricingQuote(BaseModel):
    """Immutable quote returned by the pricing collaborator.

    Never patched in place: a new quote replaces the old one whenever the
    stay dates change.
    """

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date
    nights: int = Field(..., gt=0)
    nightly_breakdown: tuple[NightlyRate, ...] = ()
    subtotal_cents: int = Field(..., ge=0)
    fees_cents: int = Field(0, ge=0)
    taxes_cents: int = Field(0, ge=0)
    total_cents: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_nights_match_dates(self) -> "PricingQuote":
        """Nights must span the quoted dates; a breakdown lists one rate per night."""
        span = (self.check_out - self.check_in).days
        if self.nights != span:
            raise ValueError(f"nights is {self.nights} but the quoted dates span {span}")
        if self.nightly_breakdown:
            if len(self.nightly_breakdown) != self.nights:
                raise ValueError(
                    f"nightly_breakdown has {len(self.nightly_breakdown)} entries "
                    f"for {self.nights} nights"
                )
            if self.nightly_breakdown[0].date != self.check_in:
                raise ValueError("nightly_breakdown must start on check_in")
        return self

    def covers(self, date_range: DateRange) -> bool:
        """Check that this quote was produced for exactly the given range."""
        return self.check_in == date_range.check_in and self.check_out == date_range.check_out


def minimum_checkout(check_in: date, min_nights: int) -> date:
    """Earliest check-out that satisfies the property's minimum stay."""
    return check_in + timedelta(days=max(min_nights, 1))
