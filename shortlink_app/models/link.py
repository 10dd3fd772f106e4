from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shortlink_app.database.connection import Base


class Link(Base):
    """
    A short name mapped to its destination URL.

    `short_name` is unique at the storage layer; a duplicate insert/update
    surfaces as an IntegrityError which the service turns into a conflict.
    """
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    original_url = Column(String, nullable=False)
    # unique=True also creates the index used by redirect lookups
    short_name = Column(String(32), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Visits are owned by the database cascade, not loaded for deletes
    visits = relationship(
        "LinkVisit",
        back_populates="link",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
