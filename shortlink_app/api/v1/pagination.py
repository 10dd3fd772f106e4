"""
`range` query handling shared by the listing endpoints.
"""

from typing import Callable, List, Optional, TypeVar

from fastapi import Query, Response

from shortlink_app.services.range_spec import RangeWindow, format_content_range, parse_range

T = TypeVar("T")


def get_range_window(
    range_param: Optional[str] = Query(
        None,
        alias="range",
        description="Half-open window as [start,end], e.g. [0,10]",
    )
) -> Optional[RangeWindow]:
    """
    Dependency: parsed window, or None when the client asked for everything.

    A bad value raises RangeError here, before the endpoint touches storage.
    """
    if not range_param:
        return None
    return parse_range(range_param)


def paginate(
    response: Response,
    resource: str,
    window: Optional[RangeWindow],
    count: Callable[[], int],
    fetch: Callable[[Optional[int], int], List[T]]
) -> List[T]:
    """
    Return the whole collection, or the requested window plus Content-Range.

    Args:
        count: total number of records
        fetch: fetch(limit, offset); limit None means no limit
    """
    if window is None:
        return fetch(None, 0)

    total = count()
    items = fetch(window.limit, window.offset)
    response.headers["Content-Range"] = format_content_range(resource, window.start, len(items), total)
    return items
