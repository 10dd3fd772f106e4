"""
Redirect pipeline: resolve -> redirect -> record.

1. Resolve the short name with one point read. A miss or a storage failure
   ends the request and no visit is recorded.
2. Build the 302 response to the stored URL.
3. Hand the visit to the VisitRecorder pool once the response exists. The
   recorder returns immediately and writes on its own threads, so the write
   never delays the response and is not lost if the client disconnects while
   the response is being sent. Its outcome never reaches the client.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import RedirectResponse

from shortlink_app.exceptions import LinkNotFoundError
from shortlink_app.models.link import Link
from shortlink_app.recorder import VisitEvent, VisitRecorder
from shortlink_app.services.link_service import LinkService

REDIRECT_STATUS = status.HTTP_302_FOUND


def get_client_ip(request: Request, trusted_header: Optional[str] = None) -> str:
    """
    Client address as seen by the app.

    When the app sits behind a proxy that sets `trusted_header`
    (e.g. CF-Connecting-IP or X-Forwarded-For), its first value wins.
    """
    if trusted_header:
        forwarded = request.headers.get(trusted_header)
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RedirectService:
    """Orchestrates lookup, redirect response and visit hand-off."""

    def __init__(
        self,
        link_service: LinkService,
        recorder: VisitRecorder,
        client_ip_header: Optional[str] = None
    ):
        self.link_service = link_service
        self.recorder = recorder
        self.client_ip_header = client_ip_header

    def resolve(self, short_name: str) -> Link:
        """
        Raises:
            LinkNotFoundError: no link has this short name
            StorageError: the lookup itself failed
        """
        link = self.link_service.get_link_by_short_name(short_name)
        if link is None:
            raise LinkNotFoundError("Short link not found")
        return link

    def build_visit(self, link: Link, request: Request, status_code: int) -> VisitEvent:
        # Captured now: the request object is not used after the response is sent
        return VisitEvent(
            link_id=link.id,
            ip=get_client_ip(request, self.client_ip_header),
            user_agent=request.headers.get("user-agent"),
            referer=request.headers.get("referer"),
            status=status_code,
        )

    def redirect(self, short_name: str, request: Request) -> RedirectResponse:
        link = self.resolve(short_name)

        response = RedirectResponse(url=link.original_url, status_code=REDIRECT_STATUS)
        visit = self.build_visit(link, request, REDIRECT_STATUS)
        self.recorder.record(visit)
        return response
