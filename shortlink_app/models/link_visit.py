from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shortlink_app.database.connection import Base


class LinkVisit(Base):
    """
    One row per resolved redirect.

    Written once by the visit recorder and never updated. `user_agent` and
    `referer` are NULL when the request did not carry the header.
    """
    __tablename__ = "link_visits"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    link_id = Column(
        Integer,
        ForeignKey("links.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ip = Column(String, nullable=False)
    user_agent = Column(String, nullable=True)
    referer = Column(String, nullable=True)
    status = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    link = relationship("Link", back_populates="visits")
