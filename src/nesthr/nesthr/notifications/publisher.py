from __future__ import annotations

import logging
from typing import Protocol

from .events import LeaveStatusChanged

notification_logger = logging.getLogger("nesthr.notifications")


class NotificationPublisher(Protocol):
    def publish(self, event: LeaveStatusChanged) -> None:
        raise NotImplementedError


class LoggingNotificationPublisher(NotificationPublisher):
    """Default publisher: hands events to the ``nesthr.notifications`` logger.

    A mail or queue consumer can attach a handler to that logger.
    """

    def publish(self, event: LeaveStatusChanged) -> None:
        notification_logger.info(
            "leave request %s -> %s by %s",
            event.request_id,
            event.status.value,
            event.actor_id,
            extra={"event": event.to_dict()},
        )
