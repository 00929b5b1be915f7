"""Manager modules for KidsTraining integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .buddy_manager import BuddyManager
from .economy_manager import EconomyManager
from .notification_manager import NotificationManager
from .session_manager import ChildNotFoundError, SessionManager
from .system_manager import SystemManager

__all__ = [
    "BaseManager",
    "BuddyManager",
    "ChildNotFoundError",
    "EconomyManager",
    "NotificationManager",
    "SessionManager",
    "SystemManager",
]
