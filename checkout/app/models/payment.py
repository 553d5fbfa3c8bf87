"""Payment plan and authorization models."""

from pydantic import BaseModel, Field, model_validator

from checkout.app.models.common import PaymentOption


class Installment(BaseModel):
    """One charge in a payment plan."""

    sequence: int = Field(..., ge=1)
    label: str
    amount_cents: int = Field(..., ge=0)


class PaymentPlan(BaseModel):
    """How a grand total is collected over time."""

    option: PaymentOption
    grand_total_cents: int = Field(..., ge=0)
    installments: list[Installment] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_installments_sum(self) -> "PaymentPlan":
        """Installments must add up to the grand total exactly."""
        total = sum(i.amount_cents for i in self.installments)
        if total != self.grand_total_cents:
            raise ValueError(
                f"installments sum to {total}, expected {self.grand_total_cents}"
            )
        return self

    @property
    def amount_due_now_cents(self) -> int:
        return self.installments[0].amount_cents

    @property
    def remaining_cents(self) -> int:
        return self.grand_total_cents - self.amount_due_now_cents


class PaymentAuthorization(BaseModel):
    """Opaque token issued by the payment form collaborator."""

    token: str = Field(..., min_length=1)
