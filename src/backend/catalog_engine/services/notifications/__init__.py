"""Notification and clipboard side channels"""

from .channels import Clipboard, Notification, Notifier, QueuedClipboard, QueuedNotifier

__all__ = ["Clipboard", "Notification", "Notifier", "QueuedClipboard", "QueuedNotifier"]
