"""Transient user notifications and file delivery sinks."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A short user-facing message."""

    title: str
    message: str
    error: bool = False


class Notifier(Protocol):
    """Interface for surfacing transient messages to the user."""

    def notify(self, title: str, message: str, *, error: bool = False) -> None:
        """Show a transient message."""


class DownloadSink(Protocol):
    """Interface for handing a finished file to the user."""

    def deliver(self, file_name: str, content: bytes, media_type: str) -> None:
        """Trigger a download of the given content."""


@dataclass
class CollectingNotifier(Notifier):
    """Notifier that records messages for the caller to display."""

    notifications: list[Notification] = field(default_factory=list)

    def notify(self, title: str, message: str, *, error: bool = False) -> None:
        """Record and log a message."""
        self.notifications.append(Notification(title, message, error))
        if error:
            logger.warning("%s: %s", title, message)
        else:
            logger.info("%s: %s", title, message)

    @property
    def last_error(self) -> Notification | None:
        """Most recent error notification, if any."""
        for notification in reversed(self.notifications):
            if notification.error:
                return notification
        return None


@dataclass(frozen=True)
class DeliveredFile:
    """A file handed to the user."""

    file_name: str
    content: bytes
    media_type: str


@dataclass
class BufferedDownloadSink(DownloadSink):
    """Download sink that keeps delivered files in memory."""

    files: list[DeliveredFile] = field(default_factory=list)

    def deliver(self, file_name: str, content: bytes, media_type: str) -> None:
        """Keep the delivered file."""
        self.files.append(DeliveredFile(file_name, content, media_type))

    @property
    def last(self) -> DeliveredFile | None:
        """Most recently delivered file."""
        return self.files[-1] if self.files else None
