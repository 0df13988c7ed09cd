"""Ports Layer - abstract interfaces implemented by adapters."""

from ragadmin.ports.notifier import Notification, NotificationVariant, NotifierPort

__all__ = ["Notification", "NotificationVariant", "NotifierPort"]
