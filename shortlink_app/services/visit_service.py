from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shortlink_app.database.guards import storage_errors
from shortlink_app.models.link_visit import LinkVisit
from shortlink_app.recorder.models import VisitEvent


class VisitService:
    """Reads and writes of `link_visits` rows."""

    def __init__(self, db: Session):
        self.db = db

    def insert_visit(self, event: VisitEvent) -> LinkVisit:
        """Insert one visit row and commit it"""
        visit = LinkVisit(
            link_id=event.link_id,
            ip=event.ip,
            user_agent=event.user_agent,
            referer=event.referer,
            status=event.status,
        )
        with storage_errors(self.db, "Failed to record link visit"):
            self.db.add(visit)
            self.db.commit()
            self.db.refresh(visit)
        return visit

    def count_visits(self) -> int:
        with storage_errors(self.db, "Failed to count link visits"):
            return self.db.execute(select(func.count(LinkVisit.id))).scalar_one()

    def list_visits(self, limit: Optional[int] = None, offset: int = 0) -> List[LinkVisit]:
        """All visits in id order, or the [offset, offset + limit) slice of them"""
        query = select(LinkVisit).order_by(LinkVisit.id)
        if limit is not None:
            query = query.limit(limit).offset(offset)
        with storage_errors(self.db, "Failed to fetch link visits"):
            return list(self.db.execute(query).scalars())
