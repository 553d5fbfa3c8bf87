"""Split-payment participant model."""

from pydantic import BaseModel, Field

from checkout.app.models.common import ParticipantStatus


class SplitParticipant(BaseModel):
    """Someone paying a share of the total."""

    id: str
    name: str
    email: str
    amount_cents: int = Field(0, ge=0)
    percentage: float = Field(0.0, ge=0, le=100)
    status: ParticipantStatus = ParticipantStatus.pending
