"""Periodic jobs: reminders every minute, session cleanup every half hour."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta

from todobot.services.auth_service import AuthService
from todobot.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

_CLEANUP_EVERY_MINUTES = 30


class Scheduler:
    """Runs the bot's background jobs at the top of each minute."""

    def __init__(
        self, notification_service: NotificationService, auth_service: AuthService
    ) -> None:
        self._notifications = notification_service
        self._auth = auth_service

    def start(self, stop_event: threading.Event) -> None:
        """Run jobs until ``stop_event`` is set."""
        logger.info("scheduler started")
        while True:
            now = datetime.now()
            fire_at = now.replace(second=0, microsecond=0) + timedelta(minutes=1)
            if stop_event.wait((fire_at - now).total_seconds()):
                break
            self.send_notifications()
            if fire_at.minute % _CLEANUP_EVERY_MINUTES == 0:
                self.cleanup_sessions()
        logger.info("scheduler stopped")

    def send_notifications(self) -> None:
        logger.debug("checking for notifications to send")
        try:
            self._notifications.send_task_notifications()
        except Exception as exc:
            logger.error("failed to send notifications: %s", exc)

    def cleanup_sessions(self) -> None:
        logger.debug("cleaning up expired sessions")
        try:
            self._auth.cleanup_expired_sessions()
        except Exception as exc:
            logger.error("failed to cleanup sessions: %s", exc)