"""Main FastAPI application for the Lunite planner."""
from fastapi import FastAPI, Request

from lunite import __version__
from lunite.api.routes.planner import router as planner_router
from lunite.core.config import settings
from lunite.core.logging import configure_logging
from lunite.core.middleware import RequestIDMiddleware
from lunite.db.session import init_db
from lunite.observability.client import init_opik
from lunite.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version=__version__)
app.add_middleware(RequestIDMiddleware)
app.include_router(planner_router)


@app.on_event("startup")
async def startup() -> None:
    """Create missing tables and initialize observability once the event loop starts."""
    init_db()
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
