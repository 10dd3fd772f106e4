from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from shortlink_app.dependencies import get_redirect_service
from shortlink_app.services.redirect_service import RedirectService

router = APIRouter(prefix="/r", tags=["redirect"])


@router.get("/{short_name}", response_class=RedirectResponse)
def redirect_to_original_url(
    short_name: str,
    request: Request,
    redirect_service: RedirectService = Depends(get_redirect_service)
):
    """
    Redirect to the original URL.

    Flow:
    1. Look the short name up (single indexed read)
    2. Respond 302 with the stored URL
    3. Hand the visit to the recorder pool once the response is built

    The visit write never delays the redirect, and a failed write is only
    logged: the client has already been redirected.
    """
    return redirect_service.redirect(short_name, request)
