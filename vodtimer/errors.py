from __future__ import annotations


class VodTimerError(Exception):
    """Base class for scheduling/persistence errors."""


class RemoteUnavailable(VodTimerError):
    """The remote store failed or refused the operation.

    Never surfaced to callers of `EventRepository`; it always triggers the
    local fallback.
    """


class NotFound(VodTimerError, LookupError):
    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class ValidationFailed(VodTimerError, ValueError):
    """An event draft violates an invariant; no store was touched."""


class StorageFatal(VodTimerError):
    """Both the remote and the local tier failed."""
