"""In-app notifications and outgoing email.

Both are fire-and-forget from the ladder's point of view: a failed
notification is logged and never undoes the write that triggered it.
"""
import logging
import smtplib
from email.mime.text import MIMEText
from typing import List, Optional

from courtside.core.exceptions import CollaboratorError, PermissionDeniedError
from courtside.models.notification_model import NotificationModel
from courtside.repositories.base import EntityStore

logger = logging.getLogger(__name__)


class EmailSender:
    """
    Sends plain-text email over SMTP.

    If SMTP_HOST is not configured it runs in dry-run mode
    (logs the message but doesn't send).
    """

    def __init__(self, host: Optional[str] = None, port: int = 587, username: Optional[str] = None,
                 password: Optional[str] = None, use_tls: bool = True, from_email: str = "ladder@courtside.local"):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email
        self.dry_run = not host
        if self.dry_run:
            logger.warning("SMTP_HOST not configured. Email runs in dry-run mode.")

    def send(self, to: str, subject: str, body: str) -> None:
        if self.dry_run:
            logger.info(f"[DRY RUN] Email to {to}: {subject}")
            return

        message = MIMEText(body, "plain")
        message["Subject"] = subject
        message["From"] = self.from_email
        message["To"] = to
        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(self.from_email, [to], message.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise CollaboratorError(f"Failed to send email to {to}: {e}") from e
        logger.info(f"Email sent to {to}: {subject}")


class NotificationService:
    def __init__(self, notifications: EntityStore[NotificationModel], email_sender: Optional[EmailSender] = None):
        self.notifications = notifications
        self.email_sender = email_sender or EmailSender()

    def create_notification(self, user_id: str, message: str, type: str) -> NotificationModel:
        return self.notifications.create({"user_id": user_id, "message": message, "type": type})

    def notify(self, user_id: str, message: str, type: str) -> None:
        try:
            self.create_notification(user_id, message, type)
        except CollaboratorError:
            logger.exception("Could not store %s notification for %s", type, user_id)

    def send_email(self, to: str, subject: str, body: str) -> bool:
        try:
            self.email_sender.send(to, subject, body)
            return True
        except CollaboratorError:
            logger.exception("Could not send email '%s' to %s", subject, to)
            return False

    def get_user_notifications(self, user_id: str, skip: int = 0, limit: int = 100) -> List[NotificationModel]:
        found = self.notifications.filter({"user_id": user_id}, sort="-created_date")
        return found[skip:skip + limit]

    def mark_notification_as_read(self, notification_id: str, current_user_id: str) -> NotificationModel:
        notification = self.notifications.get(notification_id)
        if notification.user_id != current_user_id:
            raise PermissionDeniedError("Not authorized to mark this notification as read")
        if notification.read_status: # Avoid an unnecessary write if already read
            return notification
        return self.notifications.update(notification_id, {"read_status": True})

    def mark_all_user_notifications_as_read(self, current_user_id: str) -> List[NotificationModel]:
        unread = self.notifications.filter({"user_id": current_user_id, "read_status": False})
        return [self.notifications.update(n.id, {"read_status": True}) for n in unread]
