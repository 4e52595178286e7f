"""Transient user notices."""
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NoticeKind(StrEnum):
    """Severity of a notice."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


NOTICE_ICONS: dict[NoticeKind, str] = {
    NoticeKind.SUCCESS: "✓",
    NoticeKind.ERROR: "✗",
    NoticeKind.WARNING: "!",
    NoticeKind.INFO: "i",
}


@dataclass(frozen=True)
class Notice:
    """A single dismissible notice."""

    notice_id: int
    message: str
    kind: NoticeKind
    created_at: float

    @property
    def icon(self) -> str:
        return NOTICE_ICONS[self.kind]


class Notifier:
    """
    Holds independent notices that expire after a fixed lifetime.

    Several notices can be active at once. Dismissing one removes it
    immediately and leaves the others alone.
    """

    def __init__(
        self,
        ttl_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._ids = itertools.count(1)
        self._notices: list[Notice] = []

    def notify(self, message: str, kind: NoticeKind = NoticeKind.INFO) -> Notice:
        """Append a notice."""
        notice = Notice(
            notice_id=next(self._ids),
            message=message,
            kind=NoticeKind(kind),
            created_at=self._clock(),
        )
        self._notices.append(notice)
        logger.debug("Notice %s (%s): %s", notice.notice_id, notice.kind, message)
        return notice

    def dismiss(self, notice_id: int) -> bool:
        """Remove a notice now. Returns False when it was already gone."""
        before = len(self._notices)
        self._notices = [n for n in self._notices if n.notice_id != notice_id]
        return len(self._notices) != before

    def active(self) -> list[Notice]:
        """Notices that have not expired, oldest first."""
        now = self._clock()
        self._notices = [n for n in self._notices if now - n.created_at < self.ttl_seconds]
        return list(self._notices)

    def drain(self, include_expired: bool = False) -> list[Notice]:
        """
        Return the notices and clear them.

        Args:
            include_expired: Also return notices past their lifetime, for callers
                that report everything issued during a run.
        """
        notices = list(self._notices) if include_expired else self.active()
        self._notices = []
        return notices
