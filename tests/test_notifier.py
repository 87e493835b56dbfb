import smtplib

from src.timekeeper.timekeeper.notifications import notifier as notifier_module
from src.timekeeper.timekeeper.notifications.notifier import (
    NotificationKind,
    SmtpNotifier,
    SmtpSettings,
    render_body,
    render_subject,
)

SETTINGS = SmtpSettings(host="smtp.example.com", port=465, user="bot@example.com", password="secret")
PAYLOAD = {"employee_name": "Juan Dela Cruz", "date": "2025-11-10", "start": "08:00", "end": "17:00"}


class FakeSMTP:
    sent = []

    def __init__(self, host, port, **kwargs):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def login(self, user, password):
        pass

    def sendmail(self, sender, recipients, message):
        FakeSMTP.sent.append((sender, list(recipients), message))


class FailingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


def test_missing_configuration_is_reported_not_raised():
    notifier = SmtpNotifier(SmtpSettings(host=None, port=465, user=None, password=None))

    assert notifier.notify(["juan@example.com"], NotificationKind.SCHEDULE_ASSIGNED, PAYLOAD) is False


def test_no_recipients_is_a_failed_delivery():
    assert SmtpNotifier(SETTINGS).notify(["", None], NotificationKind.SCHEDULE_ASSIGNED, PAYLOAD) is False


def test_smtp_errors_are_reported_as_failed_delivery(monkeypatch):
    monkeypatch.setattr(notifier_module.smtplib, "SMTP_SSL", FailingSMTP)

    assert SmtpNotifier(SETTINGS).notify(["juan@example.com"], NotificationKind.SCHEDULE_ASSIGNED, PAYLOAD) is False


def test_successful_delivery(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notifier_module.smtplib, "SMTP_SSL", FakeSMTP)

    delivered = SmtpNotifier(SETTINGS).notify(["juan@example.com"], NotificationKind.SCHEDULE_ASSIGNED, PAYLOAD)

    assert delivered is True
    sender, recipients, message = FakeSMTP.sent[0]
    assert sender == "bot@example.com"
    assert recipients == ["juan@example.com"]
    assert "You have been scheduled on 2025-11-10" in message


def test_subject_falls_back_when_payload_is_incomplete():
    assert render_subject(NotificationKind.LEAVE_REQUEST_DECIDED, {}) == "Leave request decided"


def test_payload_markup_is_escaped_in_the_email():
    payload = {"employee_name": "<b>Juan</b>", "type": "overtime", "reason": "<script>alert(1)</script>"}

    body = render_body(NotificationKind.OVERTIME_REASON_SUBMITTED, payload)

    assert "<script>" not in body
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in body
    assert "<h3>New overtime record from &lt;b&gt;Juan&lt;/b&gt;</h3>" in body
