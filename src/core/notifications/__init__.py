# src/core/notifications/__init__.py
"""
Домен уведомлений.
"""

from src.core.notifications.service import NotificationService, Notifier

__all__ = [
    "NotificationService",
    "Notifier",
]
