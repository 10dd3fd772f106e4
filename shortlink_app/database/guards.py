import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shortlink_app.exceptions import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, message: str):
    """Roll back and re-raise any SQLAlchemy failure as StorageError(message)."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("%s: %s", message, e)
        db.rollback()
        raise StorageError(message) from e
