"""
Fire-and-forget visit recording.

Redirects hand a VisitEvent to the VisitRecorder and move on; the write
happens on the recorder's own worker threads.
"""

from .models import VisitEvent
from .visit_recorder import VisitRecorder

__all__ = [
    "VisitEvent",
    "VisitRecorder",
]
