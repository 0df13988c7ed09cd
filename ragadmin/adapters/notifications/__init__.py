from ragadmin.adapters.notifications.console import ConsoleNotifier
from ragadmin.adapters.notifications.memory import MemoryNotifier

__all__ = ["ConsoleNotifier", "MemoryNotifier"]
