"""In-memory notifier, records everything it is given."""

from ragadmin.ports.notifier import Notification, NotifierPort


class MemoryNotifier(NotifierPort):
    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]

    def clear(self) -> None:
        self.notifications.clear()
