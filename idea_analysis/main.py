"""Idea Analysis Service - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from idea_analysis.api.v1.health import router as health_root_router
from idea_analysis.api.v1.router import v1_router
from idea_analysis.config import Settings, settings as default_settings
from idea_analysis.db.supabase_client import create_supabase
from idea_analysis.db.supabase_store import SupabaseAnalysisStore
from idea_analysis.errors import AnalysisServiceError
from idea_analysis.jobs.memory_store import InMemoryAnalysisStore
from idea_analysis.jobs.store import AnalysisStore
from idea_analysis.llm.client import AnthropicClient, LLMClient, PerplexityClient
from idea_analysis.orchestration.orchestrator import Orchestrator
from idea_analysis.orchestration.runner import RetryPolicy, SectionRunner
from idea_analysis.sections.catalog import build_default_registry

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> AnalysisStore:
    if settings.store_backend == "memory":
        return InMemoryAnalysisStore()
    if settings.store_backend == "supabase":
        return SupabaseAnalysisStore(
            create_supabase(settings), table=settings.analyses_table
        )
    raise RuntimeError(f"Unknown STORE_BACKEND '{settings.store_backend}'")


def build_llm_clients(settings: Settings) -> List[LLMClient]:
    """Return [writer] or [writer, research]."""
    if not settings.anthropic_api_key:
        raise RuntimeError("ANTHROPIC_API_KEY must be set")
    clients: List[LLMClient] = [
        AnthropicClient(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            timeout=settings.llm_request_timeout_seconds,
        )
    ]
    if settings.perplexity_api_key:
        clients.append(PerplexityClient(
            api_key=settings.perplexity_api_key,
            model=settings.perplexity_model,
            base_url=settings.perplexity_base_url,
            timeout=settings.llm_request_timeout_seconds,
        ))
    return clients


def build_retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy(
        timeout_seconds=settings.section_timeout_seconds,
        max_retries=settings.section_max_retries,
        base_delay_seconds=settings.retry_base_delay_seconds,
        max_delay_seconds=settings.retry_max_delay_seconds,
        jitter_seconds=settings.retry_jitter_seconds,
        persistence_max_retries=settings.persistence_max_retries,
        persistence_delay_seconds=settings.persistence_retry_delay_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic.

    If an orchestrator was attached to app.state before startup it is used
    as-is; otherwise store, LLM clients and registry are built from settings.
    """
    settings: Settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Idea Analysis Service on port %s", settings.api_port)
    logger.info("Store backend: %s", settings.store_backend)

    llm_clients: List[LLMClient] = []
    if getattr(app.state, "orchestrator", None) is None:
        store = build_store(settings)
        llm_clients = build_llm_clients(settings)
        registry = build_default_registry(
            writer=llm_clients[0],
            research=llm_clients[1] if len(llm_clients) > 1 else None,
            max_tokens=settings.llm_max_tokens,
        )
        app.state.orchestrator = Orchestrator(
            registry=registry,
            store=store,
            runner=SectionRunner(store, build_retry_policy(settings)),
            shutdown_grace_seconds=settings.shutdown_grace_seconds,
        )

    orchestrator: Orchestrator = app.state.orchestrator
    await orchestrator.start()

    yield

    logger.info("Shutting down Idea Analysis Service")
    await orchestrator.stop()
    await orchestrator.store.close()
    for client in llm_clients:
        await client.close()


async def handle_service_error(request: Request, exc: AnalysisServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = {"detail": exc.message}
    if exc.details:
        body["errors"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="Idea Analysis Service",
        description="Multi-section business idea analysis reports generated by LLMs",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.orchestrator = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AnalysisServiceError, handle_service_error)

    # Mount routers
    app.include_router(health_root_router, tags=["health"])  # GET /health at root
    app.include_router(v1_router)  # All /api/v1/* endpoints
    return app


app = create_app()
