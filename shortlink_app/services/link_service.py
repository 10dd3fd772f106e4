import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortlink_app.database.guards import storage_errors
from shortlink_app.exceptions import ShortNameConflictError, StorageError
from shortlink_app.models.link import Link
from shortlink_app.schemas.link import LinkCreate, LinkUpdate
from shortlink_app.services.short_name import RandomShortNameGenerator

logger = logging.getLogger(__name__)


class LinkService:
    """
    Link persistence and lookup.

    The database session is injected per request; nothing here is cached
    between requests. Uniqueness of `short_name` is left to the database:
    an IntegrityError on insert/update becomes ShortNameConflictError.
    """

    def __init__(
        self,
        db: Session,
        short_name_generator: Optional[RandomShortNameGenerator] = None,
        max_retries: int = 5
    ):
        """
        Args:
            db: Database session
            short_name_generator: Used when a link is created without a short name
            max_retries: Attempts at a generated short name before giving up
        """
        self.db = db
        self.short_name_generator = short_name_generator or RandomShortNameGenerator()
        self.max_retries = max_retries

    def get_link_by_short_name(self, short_name: str) -> Optional[Link]:
        """
        Resolve a short name in a single point read.

        Returns None when no link has this short name. There is deliberately
        no separate existence check before the fetch, so a concurrent delete
        can only ever turn into a clean miss.

        Raises:
            StorageError: the backend failed
        """
        with storage_errors(self.db, "Failed to fetch link"):
            return self.db.execute(
                select(Link).where(Link.short_name == short_name)
            ).scalar_one_or_none()

    def get_link(self, link_id: int) -> Optional[Link]:
        with storage_errors(self.db, "Failed to fetch link"):
            return self.db.get(Link, link_id)

    def count_links(self) -> int:
        with storage_errors(self.db, "Failed to count links"):
            return self.db.execute(select(func.count(Link.id))).scalar_one()

    def list_links(self, limit: Optional[int] = None, offset: int = 0) -> List[Link]:
        """All links in id order, or the [offset, offset + limit) slice of them"""
        query = select(Link).order_by(Link.id)
        if limit is not None:
            query = query.limit(limit).offset(offset)
        with storage_errors(self.db, "Failed to fetch links"):
            return list(self.db.execute(query).scalars())

    def create_link(self, data: LinkCreate) -> Link:
        """
        Create a link, generating a short name when none was given.

        Generated names are retried on collision; an explicit name that is
        already taken is a conflict.
        """
        if data.short_name:
            return self._insert(data.original_url, data.short_name)

        for attempt in range(self.max_retries):
            short_name = self.short_name_generator.generate()
            try:
                return self._insert(data.original_url, short_name)
            except ShortNameConflictError:
                logger.info("Generated short name %r already taken (attempt %d)", short_name, attempt + 1)

        raise StorageError("Failed to generate short name")

    def update_link(self, link_id: int, data: LinkUpdate) -> Optional[Link]:
        """Replace url and short name; None if the link does not exist"""
        link = self.get_link(link_id)
        if link is None:
            return None

        link.original_url = data.original_url
        link.short_name = data.short_name
        self._commit(link, "Failed to update link")
        return link

    def delete_link(self, link_id: int) -> bool:
        """Delete a link; its visits go with it via ON DELETE CASCADE"""
        link = self.get_link(link_id)
        if link is None:
            return False

        with storage_errors(self.db, "Failed to delete link"):
            self.db.delete(link)
            self.db.commit()
        return True

    def _insert(self, original_url: str, short_name: str) -> Link:
        link = Link(original_url=original_url, short_name=short_name)
        self.db.add(link)
        self._commit(link, "Failed to create link")
        return link

    def _commit(self, link: Link, message: str) -> None:
        with storage_errors(self.db, message):
            try:
                self.db.commit()
            except IntegrityError as e:
                # short_name is the only unique column besides the primary key
                self.db.rollback()
                raise ShortNameConflictError() from e
            self.db.refresh(link)
