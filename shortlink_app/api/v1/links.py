import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from shortlink_app.config import Settings, get_settings
from shortlink_app.dependencies import get_link_service
from shortlink_app.exceptions import LinkNotFoundError
from shortlink_app.schemas.link import LinkCreate, LinkResponse, LinkUpdate
from shortlink_app.services.link_service import LinkService
from shortlink_app.services.range_spec import RangeWindow
from shortlink_app.api.v1.pagination import get_range_window, paginate

router = APIRouter(prefix="/links", tags=["links"])


MAX_LINK_ID = 2 ** 31 - 1
_LINK_ID = re.compile(r"[+-]?[0-9]+")


def parse_link_id(link_id: str) -> int:
    """Ids are 32-bit decimal integers; anything else is a client error"""
    value = int(link_id) if _LINK_ID.fullmatch(link_id) else None
    if value is None or not -MAX_LINK_ID - 1 <= value <= MAX_LINK_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ID format")
    return value


@router.get("", response_model=List[LinkResponse])
def list_links(
    response: Response,
    window: Optional[RangeWindow] = Depends(get_range_window),
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    """All links, or the `range=[start,end]` window with a Content-Range header"""
    links = paginate(
        response,
        "links",
        window,
        count=link_service.count_links,
        fetch=link_service.list_links,
    )
    return [LinkResponse.from_link(link, settings.base_url) for link in links]


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def create_link(
    link_data: LinkCreate,
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    """Create a link; a short name is generated when none is given"""
    link = link_service.create_link(link_data)
    return LinkResponse.from_link(link, settings.base_url)


@router.get("/{link_id}", response_model=LinkResponse)
def get_link(
    link_id: str,
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    link = link_service.get_link(parse_link_id(link_id))
    if link is None:
        raise LinkNotFoundError()
    return LinkResponse.from_link(link, settings.base_url)


@router.put("/{link_id}", response_model=LinkResponse)
def update_link(
    link_id: str,
    link_data: LinkUpdate,
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings)
):
    link = link_service.update_link(parse_link_id(link_id), link_data)
    if link is None:
        raise LinkNotFoundError()
    return LinkResponse.from_link(link, settings.base_url)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(
    link_id: str,
    link_service: LinkService = Depends(get_link_service)
):
    """Delete a link together with its visits"""
    if not link_service.delete_link(parse_link_id(link_id)):
        raise LinkNotFoundError()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
