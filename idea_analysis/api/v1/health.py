"""Health check endpoint."""

import platform
import sys

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Service health, store backend and orchestrator state."""
    settings = request.app.state.settings
    orchestrator = getattr(request.app.state, "orchestrator", None)

    return {
        "status": "healthy" if orchestrator is not None else "starting",
        "store_backend": settings.store_backend,
        "sections_registered": len(orchestrator.registry) if orchestrator else 0,
        "runners_in_flight": orchestrator.in_flight if orchestrator else 0,
        "python_version": sys.version,
        "platform": platform.platform(),
    }
