"""
Transient user notices ("Post published successfully!", "Failed to ...").

A NoticeChannel is an explicit publish/subscribe channel owned by whoever
creates it. The API creates one per request and returns the notices that
were published while handling it; nothing is kept at module level.

Usage:
    channel = NoticeChannel()
    unsubscribe = channel.subscribe(lambda notices: print(notices))
    channel.publish("Post saved as draft!")
    unsubscribe()
"""

import secrets
import time
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional

NoticeType = Literal["success", "error", "warning"]
Listener = Callable[[List["Notice"]], None]

DEFAULT_DURATION_MS = 4000


@dataclass(frozen=True)
class Notice:
    id: str
    type: NoticeType
    message: str
    duration_ms: int = DEFAULT_DURATION_MS
    created_at: float = field(default_factory=time.monotonic)

    @property
    def expires_at(self) -> float:
        return self.created_at + self.duration_ms / 1000

    def to_dict(self) -> dict:
        return {"id": self.id, "type": self.type, "message": self.message, "duration_ms": self.duration_ms}


class NoticeChannel:
    """Publish/subscribe channel for notices with explicit (un)subscription."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._notices: List[Notice] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners = [existing for existing in self._listeners if existing is not listener]

    def publish(
        self,
        message: str,
        type: NoticeType = "success",
        duration_ms: int = DEFAULT_DURATION_MS,
    ) -> Notice:
        notice = Notice(
            id=secrets.token_hex(4),
            type=type,
            message=message,
            duration_ms=duration_ms,
            created_at=self._clock(),
        )
        self._notices.append(notice)
        self._notify()
        return notice

    def dismiss(self, notice_id: str) -> None:
        before = len(self._notices)
        self._notices = [n for n in self._notices if n.id != notice_id]
        if len(self._notices) != before:
            self._notify()

    def expire(self, now: Optional[float] = None) -> None:
        """Drop notices whose display duration has elapsed."""
        now = self._clock() if now is None else now
        before = len(self._notices)
        self._notices = [n for n in self._notices if n.expires_at > now]
        if len(self._notices) != before:
            self._notify()

    def active(self) -> List[Notice]:
        return list(self._notices)

    def _notify(self) -> None:
        snapshot = self.active()
        for listener in list(self._listeners):
            listener(list(snapshot))
