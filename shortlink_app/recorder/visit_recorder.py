"""
Visit recorder

Writes visit rows on a thread pool owned by the recorder, not by any request.
`record()` only submits work and returns; a closed client connection or a
finished request never cancels a submitted write.

Failure policy:
- A failed write is logged and dropped. Nothing is retried and no caller is
  ever told; a lost visit is acceptable, a slowed redirect is not.
- On shutdown in-flight writes get a bounded grace period, anything still
  queued after that is dropped.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Optional, Set

from sqlalchemy.orm import Session

from .models import VisitEvent

logger = logging.getLogger(__name__)


class VisitRecorder:
    """
    Fire-and-forget writer for VisitEvents.

    Each write opens its own session from `session_factory`, so it never
    shares the (already closed) request session.
    """

    def __init__(self, session_factory: Callable[[], Session], max_workers: int = 4):
        """
        Args:
            session_factory: Creates a fresh database session per write
            max_workers: Size of the write pool
        """
        self.session_factory = session_factory
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="visit-recorder",
        )
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def record(self, event: VisitEvent) -> None:
        """Schedule the write of one visit and return immediately."""
        with self._lock:
            if self._closed:
                logger.warning("Visit recorder is shut down, dropping visit for link %s", event.link_id)
                return
            future = self._executor.submit(self._write, event)
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for writes submitted so far.

        Returns:
            True if all of them finished within `timeout`
        """
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop accepting visits, give in-flight writes `timeout` seconds, drop the rest."""
        with self._lock:
            self._closed = True

        if not self.flush(timeout):
            with self._lock:
                dropped = len(self._pending)
            logger.warning("Dropping %d unfinished visit writes on shutdown", dropped)

        self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Visit recorder stopped")

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _write(self, event: VisitEvent) -> None:
        from shortlink_app.services.visit_service import VisitService

        db = None
        try:
            db = self.session_factory()
            visit = VisitService(db).insert_visit(event)
            logger.debug("Recorded visit %s for link %s", visit.id, event.link_id)
        except Exception:
            # Analytics loss is acceptable; it must never reach the redirect
            logger.exception("Failed to record visit for link %s", event.link_id)
        finally:
            if db is not None:
                db.close()
