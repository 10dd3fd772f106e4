from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from shortlink_app.dependencies import get_visit_service
from shortlink_app.schemas.link_visit import LinkVisitResponse
from shortlink_app.services.range_spec import RangeWindow
from shortlink_app.services.visit_service import VisitService
from shortlink_app.api.v1.pagination import get_range_window, paginate

router = APIRouter(prefix="/link_visits", tags=["link_visits"])


@router.get("", response_model=List[LinkVisitResponse])
def list_link_visits(
    response: Response,
    window: Optional[RangeWindow] = Depends(get_range_window),
    visit_service: VisitService = Depends(get_visit_service)
):
    """All recorded visits, or the `range=[start,end]` window with a Content-Range header"""
    return paginate(
        response,
        "link_visits",
        window,
        count=visit_service.count_visits,
        fetch=visit_service.list_visits,
    )
