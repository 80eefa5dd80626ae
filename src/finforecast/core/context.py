"""
Context classes for FinForecast requests.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from .errors import RequestCancelledError


@dataclass
class RequestContext:
    """
    Per-request context passed to `ProjectionService`.

    The provider reads are the only suspension point of a projection, so
    cancellation is checked around them rather than inside the monthly loop.

    Attributes:
        user_id: Authenticated user; empty means unauthenticated
        deadline: Absolute ``time.monotonic()`` deadline, or None
        cancel_event: Set by the caller to cancel the request

    Example:
        ```python
        ctx = RequestContext.with_timeout("user-1", seconds=5.0)
        service.calculate_projection(ctx, request)
        ```
    """

    user_id: str | None
    deadline: float | None = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def with_timeout(cls, user_id: str | None, seconds: float) -> RequestContext:
        return cls(user_id=user_id, deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        if self.cancel_event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        """Raise `RequestCancelledError` if the request was cancelled or timed out."""
        if self.cancel_event.is_set():
            raise RequestCancelledError("request cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise RequestCancelledError("request deadline exceeded")
