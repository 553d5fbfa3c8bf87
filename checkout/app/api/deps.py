"""Shared FastAPI dependencies.

Process-wide singletons are cached; tests swap them out with
``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from checkout.app.adapters.base import BookingBackend
from checkout.app.adapters.fixtures import FixtureBookingApi, load_addon_catalog, load_insurance_plans
from checkout.app.adapters.http import HttpBookingApi
from checkout.app.config import get_settings
from checkout.app.db.inmemory import InMemoryCheckoutStore
from checkout.app.middleware.single_flight import SingleFlightGuard
from checkout.app.orchestration.submitter import ReservationSubmitter
from checkout.app.pricing.addons import AddonLedger
from checkout.app.pricing.protection import ProtectionCalculator
from checkout.app.pricing.simulator import DemandPricingSimulator
from checkout.app.utils.logging import StructuredCheckoutLogger
from checkout.app.utils.metrics import PrometheusCheckoutMetrics


@lru_cache
def get_backend() -> BookingBackend:
    """Booking backend selected by settings."""
    settings = get_settings()
    if settings.use_fixture_backend:
        return FixtureBookingApi()
    return HttpBookingApi(
        settings.booking_api_url,
        timeout_s=settings.booking_api_timeout_s,
        default_min_stay=settings.default_min_stay_nights,
    )


@lru_cache
def get_store() -> InMemoryCheckoutStore:
    return InMemoryCheckoutStore()


@lru_cache
def get_addon_ledger() -> AddonLedger:
    return AddonLedger(load_addon_catalog())


@lru_cache
def get_protection() -> ProtectionCalculator:
    return ProtectionCalculator(load_insurance_plans())


@lru_cache
def get_simulator() -> DemandPricingSimulator:
    settings = get_settings()
    return DemandPricingSimulator(
        seed=settings.simulator_rng_seed,
        unavailable_ratio=settings.simulator_unavailable_ratio,
    )


@lru_cache
def get_submission_guard() -> SingleFlightGuard:
    return SingleFlightGuard()


def get_submitter(
    backend: Annotated[BookingBackend, Depends(get_backend)],
    guard: Annotated[SingleFlightGuard, Depends(get_submission_guard)],
) -> ReservationSubmitter:
    """Submitter bound to the current backend and the shared guard."""
    return ReservationSubmitter(
        backend,
        guard=guard,
        metrics=PrometheusCheckoutMetrics(),
        logger=StructuredCheckoutLogger(),
    )
