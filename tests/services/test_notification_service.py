import smtplib

import pytest

from courtside.core.exceptions import CollaboratorError, PermissionDeniedError
from courtside.services.notification_service import EmailSender, NotificationService


class FailingEmailSender:
    def send(self, to, subject, body):
        raise CollaboratorError("SMTP down")

@pytest.fixture
def notification_service(stores):
    return NotificationService(stores.notifications)


class TestNotificationService:

    def test_create_and_list_newest_first(self, notification_service: NotificationService):
        notification_service.create_notification("user-1", "first", "match_proposed")
        notification_service.create_notification("user-1", "second", "match_result")
        notification_service.create_notification("user-2", "other", "match_result")

        notifications = notification_service.get_user_notifications("user-1")
        assert {n.message for n in notifications} == {"first", "second"}
        assert notifications[0].created_date >= notifications[1].created_date
        assert all(not n.read_status for n in notifications)

    def test_pagination(self, notification_service: NotificationService):
        for i in range(5):
            notification_service.create_notification("user-1", f"n{i}", "info")
        assert len(notification_service.get_user_notifications("user-1", skip=1, limit=2)) == 2
        assert len(notification_service.get_user_notifications("user-1", skip=4, limit=10)) == 1

    def test_mark_as_read(self, notification_service: NotificationService):
        notification = notification_service.create_notification("user-1", "hello", "info")
        assert notification_service.mark_notification_as_read(notification.id, "user-1").read_status is True
        # Already read: no error
        assert notification_service.mark_notification_as_read(notification.id, "user-1").read_status is True

    def test_mark_someone_elses_notification(self, notification_service: NotificationService):
        notification = notification_service.create_notification("user-1", "hello", "info")
        with pytest.raises(PermissionDeniedError):
            notification_service.mark_notification_as_read(notification.id, "user-2")

    def test_mark_all_as_read(self, notification_service: NotificationService):
        for i in range(3):
            notification_service.create_notification("user-1", f"n{i}", "info")
        assert len(notification_service.mark_all_user_notifications_as_read("user-1")) == 3
        assert notification_service.mark_all_user_notifications_as_read("user-1") == []

    def test_failed_email_is_logged_not_raised(self, stores, caplog):
        service = NotificationService(stores.notifications, FailingEmailSender())
        assert service.send_email("a@example.com", "Subject", "Body") is False
        assert "Could not send email" in caplog.text


class TestEmailSender:

    def test_dry_run_without_host(self, caplog):
        sender = EmailSender()
        assert sender.dry_run is True
        with caplog.at_level("INFO"):
            sender.send("a@example.com", "Hi", "Body")
        assert "[DRY RUN]" in caplog.text

    def test_smtp_failure_is_a_collaborator_error(self, monkeypatch):
        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, "busy")

        monkeypatch.setattr(smtplib, "SMTP", refuse)
        sender = EmailSender(host="smtp.example.com")
        with pytest.raises(CollaboratorError):
            sender.send("a@example.com", "Hi", "Body")
