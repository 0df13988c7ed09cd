"""Notifier Port - how workflow outcomes reach the operator.

Notifications are non-blocking: a workflow emits them and carries on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A toast-style message: a short title and a description."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


class NotifierPort(ABC):
    """Interface for surfacing notifications."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        pass

    def success(self, description: str) -> None:
        self.notify(Notification("Success", description))

    def error(self, description: str) -> None:
        self.notify(Notification("Error", description, NotificationVariant.DESTRUCTIVE))

    def warning(self, description: str) -> None:
        self.notify(Notification("Warning", description, NotificationVariant.DESTRUCTIVE))

    def partial_success(self, description: str) -> None:
        self.notify(
            Notification("Partial Success", description, NotificationVariant.DESTRUCTIVE)
        )
