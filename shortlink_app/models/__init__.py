"""
Database models for the link redirector.

Links and their visits live in the same database so that deleting a link
cascades to its visit rows.
"""

from .link import Link
from .link_visit import LinkVisit

__all__ = ["Link", "LinkVisit"]
