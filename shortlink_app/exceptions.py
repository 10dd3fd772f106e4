"""
Domain exceptions.

Each exception carries the HTTP status it maps to; the handlers in
`shortlink_app.api.errors` render them as JSON. Services raise these and never
build HTTP responses themselves.
"""


class ShortLinkError(Exception):
    """Base class for all application errors"""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RangeError(ShortLinkError, ValueError):
    """Client supplied an unusable `range` query parameter"""

    status_code = 400
    message = "invalid range"


class MalformedRangeError(RangeError):
    """Bracket/comma structure is wrong or a bound is not an integer"""

    message = "invalid range format, expected [start,end]"


class InvalidBoundsError(RangeError):
    """Start is negative or end precedes start"""

    message = "invalid range bounds"


class LinkNotFoundError(ShortLinkError):
    status_code = 404
    message = "Link not found"


class ShortNameConflictError(ShortLinkError):
    """Unique constraint on `links.short_name` was violated"""

    status_code = 422
    message = "short name already in use"
    field = "short_name"


class StorageError(ShortLinkError):
    """The storage backend failed while serving a request"""

    status_code = 500
    message = "Storage backend failure"
