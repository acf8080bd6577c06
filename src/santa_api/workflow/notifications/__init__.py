"""Santa disclosure notification senders."""

from santa_api.workflow.notifications.sender import SANTA_EMAIL_SUBJECT
from santa_api.workflow.notifications.sender import LogNotificationSender
from santa_api.workflow.notifications.sender import NotificationSender
from santa_api.workflow.notifications.sender import SmtpNotificationSender
from santa_api.workflow.notifications.sender import build_santa_message

__all__ = [
    "SANTA_EMAIL_SUBJECT",
    "LogNotificationSender",
    "NotificationSender",
    "SmtpNotificationSender",
    "build_santa_message",
]
