"""
FastAPI dependencies for dependency injection.

The visit recorder is built once in the app lifespan and kept on
`app.state`; settings are built once per process. Services are cheap and
created per request around the request's database session.

Pattern: Dependency Injection
- Routes depend on services, services depend on the session/recorder
- Tests swap `get_db` and `get_visit_recorder` via dependency_overrides
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shortlink_app.config import Settings, get_settings
from shortlink_app.database.connection import get_db
from shortlink_app.recorder import VisitRecorder
from shortlink_app.services.link_service import LinkService
from shortlink_app.services.redirect_service import RedirectService
from shortlink_app.services.short_name import RandomShortNameGenerator
from shortlink_app.services.visit_service import VisitService


def get_visit_recorder(request: Request) -> VisitRecorder:
    """The process-wide recorder created at startup"""
    return request.app.state.visit_recorder


def get_link_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> LinkService:
    return LinkService(
        db=db,
        short_name_generator=RandomShortNameGenerator(length=settings.short_name_length),
        max_retries=settings.short_name_max_retries,
    )


def get_visit_service(db: Session = Depends(get_db)) -> VisitService:
    return VisitService(db)


def get_redirect_service(
    link_service: LinkService = Depends(get_link_service),
    recorder: VisitRecorder = Depends(get_visit_recorder),
    settings: Settings = Depends(get_settings)
) -> RedirectService:
    """
    Get RedirectService with all dependencies injected.

    The recorder is shared by every request; the link service (and its
    session) belongs to this request only.
    """
    return RedirectService(
        link_service=link_service,
        recorder=recorder,
        client_ip_header=settings.client_ip_header,
    )
