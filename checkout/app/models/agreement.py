"""Lease agreement models."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class Addendum(BaseModel):
    """Lease clause the guest may have to acknowledge."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str
    required: bool


class AgreementTerms(BaseModel):
    """Snapshot of the terms a signature was given over."""

    model_config = ConfigDict(frozen=True)

    grand_total_cents: int
    check_in: date | None
    check_out: date | None
    pets: int


class Agreement(BaseModel):
    """Captured signature plus acknowledged addenda."""

    model_config = ConfigDict(frozen=True)

    signature: str = Field(..., min_length=1)
    accepted_addendum_ids: frozenset[str] = frozenset()
    signed_at: datetime
    terms: AgreementTerms
