"""Email notifications: Brevo client, templates and periodic checks."""

from study_tracker.notifications.email import (
    BrevoEmailClient,
    EmailMessage,
    EmailResult,
)
from study_tracker.notifications.notifier import Mailer, Notifier, create_mailer

__all__ = [
    "BrevoEmailClient",
    "EmailMessage",
    "EmailResult",
    "Mailer",
    "Notifier",
    "create_mailer",
]
