import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from shortlink_app.config import settings
from shortlink_app.database.connection import engine, Base, SessionLocal
from shortlink_app.logging_config import initialize_logging
from shortlink_app.recorder import VisitRecorder
from shortlink_app.api.errors import register_exception_handlers
from shortlink_app.api.v1 import links, link_visits, redirect

# Import models to ensure they're registered with Base
from shortlink_app.models import Link, LinkVisit  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging, tables, visit recorder. Shutdown: drain the recorder."""
    initialize_logging(settings.log_level)

    Base.metadata.create_all(bind=engine)

    app.state.visit_recorder = VisitRecorder(
        session_factory=SessionLocal,
        max_workers=settings.visit_recorder_workers,
    )
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    app.state.visit_recorder.shutdown(timeout=settings.visit_recorder_shutdown_timeout)


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Short link redirector with asynchronous visit logging",
    debug=settings.debug,
    lifespan=lifespan,
)


# CORS (admin frontend)
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        expose_headers=["Content-Range"],
    )
else:
    allowed_origin = settings.frontend_url or settings.base_url
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[allowed_origin] if allowed_origin else [],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept"],
        expose_headers=["Content-Range"],
    )

register_exception_handlers(app)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


@app.get("/ping", response_class=PlainTextResponse)
def ping():
    return "pong"


######## Include routers
app.include_router(links.router, prefix="/api")
app.include_router(link_visits.router, prefix="/api")
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
