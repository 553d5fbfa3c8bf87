"""FastAPI application."""

from fastapi import FastAPI

from checkout.app.api.routes.calendar import router as calendar_router
from checkout.app.api.routes.checkout import router as checkout_router
from checkout.app.api.routes.health import router as health_router
from checkout.app.api.routes.metrics import router as metrics_router
from checkout.app.api.routes.splits import router as splits_router

app = FastAPI(title="Checkout API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(checkout_router, tags=["checkouts"])
app.include_router(calendar_router, tags=["calendar"])
app.include_router(splits_router, tags=["splits"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Checkout API", "version": "0.1.0"}
