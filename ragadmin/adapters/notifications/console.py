"""Rich console notifier."""

import logging

from rich.console import Console

from ragadmin.ports.notifier import Notification, NotificationVariant, NotifierPort

logger = logging.getLogger(__name__)

_TITLE_STYLES = {
    "Success": "green",
    "Partial Success": "yellow",
    "Warning": "yellow",
    "Error": "red",
}


class ConsoleNotifier(NotifierPort):
    """Prints notifications to the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def notify(self, notification: Notification) -> None:
        style = _TITLE_STYLES.get(notification.title)
        if style is None:
            style = "red" if notification.variant == NotificationVariant.DESTRUCTIVE else "cyan"
        self.console.print(f"[{style}]{notification.title}:[/{style}] {notification.description}")
        logger.debug(f"notification {notification.title}: {notification.description}")
