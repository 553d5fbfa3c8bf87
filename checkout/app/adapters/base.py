"""Collaborator contracts consumed by the checkout engine."""

from datetime import date
from enum import Enum
from typing import Protocol

from checkout.app.models.property import Property
from checkout.app.models.quote import PricingQuote
from checkout.app.models.reservation import ReservationRequest


class BookingBackendError(Exception):
    """Base class for collaborator failures."""

    retryable: bool = False


class PropertyNotFoundError(BookingBackendError):
    """No property with the given slug."""

    pass


class DatesUnavailableError(BookingBackendError):
    """Dates were taken between quoting and submission."""

    pass


class BackendUnavailableError(BookingBackendError):
    """Property or pricing lookup could not be completed; safe to retry."""

    retryable = True


class ReservationNetworkError(BookingBackendError):
    """Transport or 5xx failure; safe for the user to retry."""

    retryable = True


class ReservationRejectedError(BookingBackendError):
    """Backend refused the request as invalid."""

    pass


class PaymentDeclinedError(BookingBackendError):
    """Payment collaborator declined the charge. Message is shown verbatim."""

    pass


class InviteOutcome(str, Enum):
    """Result of a split-payment invite."""

    invited = "invited"
    failed = "failed"


class PropertyLookup(Protocol):
    """Property lookup by slug."""

    async def get_property(self, slug: str) -> Property:
        """Fetch a property.

        Raises:
            PropertyNotFoundError: Unknown slug
        """
        ...


class PricingLookup(Protocol):
    """Authoritative availability and pricing."""

    async def get_quote(
        self, property_id: str, check_in: date, check_out: date
    ) -> PricingQuote | None:
        """Quote a stay; None when the dates are not available."""
        ...


class ReservationCreator(Protocol):
    """Reservation creation."""

    async def create_reservation(self, request: ReservationRequest) -> str:
        """Create the reservation and return its id.

        Raises:
            DatesUnavailableError: Dates no longer available
            PaymentDeclinedError: Charge declined
            ReservationRejectedError: Request failed backend validation
            ReservationNetworkError: Transient failure
        """
        ...


class InviteDispatcher(Protocol):
    """Split-payment invitation delivery."""

    async def send_invite(self, email: str) -> InviteOutcome:
        ...


class BookingBackend(PropertyLookup, PricingLookup, ReservationCreator, InviteDispatcher, Protocol):
    """All collaborators behind one client."""

    pass
