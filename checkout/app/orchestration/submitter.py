"""Reservation submitter.

Turns a completed checkout into a reservation. Expected failures come back
as explicit result values; only programming errors propagate.
"""

import time

from checkout.app.adapters.base import (
    DatesUnavailableError,
    PaymentDeclinedError,
    ReservationCreator,
    ReservationNetworkError,
    ReservationRejectedError,
)
from checkout.app.middleware.single_flight import InFlightError, SingleFlightGuard
from checkout.app.models.payment import PaymentAuthorization
from checkout.app.models.reservation import (
    SubmissionFailed,
    SubmissionResult,
    SubmissionSucceeded,
    SubmissionSuppressed,
)
from checkout.app.orchestration.hooks import CheckoutLogger, CheckoutMetrics
from checkout.app.orchestration.steps import BookingStepMachine


class ReservationSubmitter:
    """Submits checkouts to the reservation collaborator, one at a time per draft."""

    def __init__(
        self,
        creator: ReservationCreator,
        *,
        guard: SingleFlightGuard | None = None,
        metrics: CheckoutMetrics | None = None,
        logger: CheckoutLogger | None = None,
    ) -> None:
        self._creator = creator
        self._guard = guard or SingleFlightGuard()
        self._metrics = metrics or CheckoutMetrics()
        self._logger = logger or CheckoutLogger()

    async def submit(
        self,
        machine: BookingStepMachine,
        authorization: PaymentAuthorization | None,
    ) -> SubmissionResult:
        """Submit the machine's draft.

        Outcomes:
        - validation: machine not on payment, a step incomplete, or no
          token; nothing is sent
        - unavailable: dates were taken; quote dropped, machine back on dates
        - network: transient failure, safe to retry; draft untouched
        - payment: charge declined; collaborator message passed through
        - rejected: backend refused the request
        - suppressed: a submission for this draft is already in flight

        Args:
            machine: Checkout to submit
            authorization: Token from the payment form

        Returns:
            SubmissionResult
        """
        draft_id = machine.draft.draft_id
        start_time = time.perf_counter()

        if self._guard.is_pending(draft_id):
            return self._finish(machine, start_time, SubmissionSuppressed())

        violations = machine.submission_violations(authorization)
        if violations or authorization is None:
            result = SubmissionFailed(
                kind="validation",
                message="; ".join(v.message for v in violations),
                retryable=False,
            )
            return self._finish(machine, start_time, result)

        request = machine.build_reservation_request(authorization)

        try:
            reservation_id = await self._guard.run(
                draft_id, lambda: self._creator.create_reservation(request)
            )
        except InFlightError:
            result = SubmissionSuppressed()
        except DatesUnavailableError as e:
            machine.invalidate_quote()
            result = SubmissionFailed(kind="unavailable", message=str(e), retryable=False)
        except PaymentDeclinedError as e:
            result = SubmissionFailed(kind="payment", message=str(e), retryable=False)
        except ReservationNetworkError as e:
            result = SubmissionFailed(kind="network", message=str(e), retryable=True)
        except ReservationRejectedError as e:
            result = SubmissionFailed(kind="rejected", message=str(e), retryable=False)
        else:
            machine.close()
            result = SubmissionSucceeded(reservation_id=reservation_id)

        return self._finish(machine, start_time, result, request.payment.amount_cents)

    def _finish(
        self,
        machine: BookingStepMachine,
        start_time: float,
        result: SubmissionResult,
        amount_cents: int | None = None,
    ) -> SubmissionResult:
        latency_ms = (time.perf_counter() - start_time) * 1000
        outcome = result.status if not isinstance(result, SubmissionFailed) else result.kind
        error_reason = result.message if not isinstance(result, SubmissionSucceeded) else None

        self._metrics.record_submission(outcome, latency_ms)
        self._logger.log_submission(
            machine.draft.draft_id,
            outcome,
            latency_ms,
            amount_cents=amount_cents,
            error_reason=error_reason,
        )
        return result
