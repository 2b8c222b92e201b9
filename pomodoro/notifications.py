"""Single-slot fallback notification.

Only one request can be pending at a time.  Scheduling always replaces
whatever was pending, and the delivery itself is silent because the
timer's own feedback sequence owns audio.
"""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import QObject, QTimer

from .constants import NOTIFICATION_ID, NOTIFICATION_TITLE

logger = logging.getLogger(__name__)


class NotificationScheduler(QObject):
    """Delivers ``show(title, body)`` once, *after_seconds* from now.

    *show* is typically a tray icon's ``showMessage``; it is called from
    the Qt event loop.  Delivery errors are logged and dropped.
    """

    def __init__(
        self,
        show: Callable[[str, str], None],
        parent: QObject | None = None,
        *,
        identifier: str = NOTIFICATION_ID,
    ) -> None:
        super().__init__(parent)
        self._show = show
        self._identifier = identifier
        self._message: str | None = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._deliver)

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def pending(self) -> bool:
        return self._message is not None and self._timer.isActive()

    @property
    def pending_message(self) -> str | None:
        return self._message if self.pending else None

    def schedule(self, after_seconds: int, message: str) -> None:
        """Replace any pending request with one firing in *after_seconds*."""
        self.cancel()
        if after_seconds <= 0:
            return
        self._message = message
        self._timer.start(int(after_seconds * 1000))
        logger.debug("Notification %s scheduled in %ss", self._identifier, after_seconds)

    def cancel(self) -> None:
        self._timer.stop()
        self._message = None

    def _deliver(self) -> None:
        message, self._message = self._message, None
        if message is None:
            return
        try:
            self._show(NOTIFICATION_TITLE, message)
        except Exception:
            logger.warning("Notification %s could not be shown", self._identifier, exc_info=True)
