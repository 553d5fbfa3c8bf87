"""Health check endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from checkout.app.api.deps import get_store
from checkout.app.config import get_settings
from checkout.app.db.inmemory import InMemoryCheckoutStore

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(store: Annotated[InMemoryCheckoutStore, Depends(get_store)]) -> dict[str, Any]:
    """Health check with component details.

    The booking backend is not contacted; it is reported as configured.
    """
    settings = get_settings()
    return {
        "status": "ok",
        "components": {
            "backend": "fixtures" if settings.use_fixture_backend else settings.booking_api_url,
            "sessions": len(store),
        },
    }
