"""Split-payment preview endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from checkout.app.config import Settings, get_settings
from checkout.app.models.common import ParticipantStatus, SplitStrategy
from checkout.app.models.split import SplitParticipant
from checkout.app.models.violations import Violation
from checkout.app.splits.ledger import PAYER_ID, SplitLedger

router = APIRouter(prefix="/splits", tags=["splits"])


class ParticipantInput(BaseModel):
    """A participant as entered on the split form."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    amount_cents: int | None = Field(None, ge=0)
    percentage: float | None = Field(None, ge=0, le=100)
    status: ParticipantStatus | None = None


class SplitPreviewRequest(BaseModel):
    """Request body for POST /splits/preview."""

    total_cents: int = Field(..., ge=0)
    strategy: SplitStrategy = SplitStrategy.equal
    payer_name: str = "You"
    payer_email: str = ""
    payer_amount_cents: int | None = Field(None, ge=0)
    payer_percentage: float | None = Field(None, ge=0, le=100)
    participants: list[ParticipantInput] = Field(default_factory=list)


class SplitPreviewResponse(BaseModel):
    total_cents: int
    strategy: SplitStrategy
    participants: list[SplitParticipant]
    allocated_cents: int
    balanced: bool
    violations: list[Violation]


def _apply_entry(
    ledger: SplitLedger,
    participant_id: str,
    strategy: SplitStrategy,
    amount_cents: int | None,
    percentage: float | None,
) -> None:
    if strategy == SplitStrategy.custom and amount_cents is not None:
        ledger.set_amount(participant_id, amount_cents)
    elif strategy == SplitStrategy.percentage and percentage is not None:
        ledger.set_percentage(participant_id, percentage)


@router.post("/preview", response_model=SplitPreviewResponse)
async def preview_split(
    request: SplitPreviewRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SplitPreviewResponse:
    """Allocate a total among participants without persisting anything."""
    ledger = SplitLedger(
        request.total_cents,
        payer_name=request.payer_name,
        payer_email=request.payer_email,
        strategy=request.strategy,
        tolerance_cents=settings.split_balance_tolerance_cents,
    )

    try:
        for entry in request.participants:
            participant = ledger.add_participant(entry.name, entry.email)
            _apply_entry(ledger, participant.id, request.strategy, entry.amount_cents, entry.percentage)
            if entry.status is not None:
                ledger.mark_status(participant.id, entry.status)
        _apply_entry(
            ledger, PAYER_ID, request.strategy, request.payer_amount_cents, request.payer_percentage
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_SPLIT", "message": str(e)},
        ) from e

    return SplitPreviewResponse(
        total_cents=ledger.total_cents,
        strategy=ledger.strategy,
        participants=ledger.participants,
        allocated_cents=ledger.allocated_cents,
        balanced=ledger.is_balanced,
        violations=ledger.check_balance(),
    )
