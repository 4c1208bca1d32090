"""Request-scoped accessors for objects built during application startup."""

from fastapi import HTTPException, Request

from idea_analysis.orchestration.orchestrator import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Orchestrator not initialized")
    return orchestrator
