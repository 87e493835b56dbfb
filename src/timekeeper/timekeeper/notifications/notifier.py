from __future__ import annotations

import html
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from enum import Enum
from typing import Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    LEAVE_REQUEST_SUBMITTED = "leave_request_submitted"
    LEAVE_REQUEST_DECIDED = "leave_request_decided"
    OVERTIME_REASON_SUBMITTED = "overtime_reason_submitted"
    SCHEDULE_ASSIGNED = "schedule_assigned"


class Notifier(Protocol):
    def notify(self, recipients: Sequence[str], kind: NotificationKind, payload: Mapping) -> bool:
        """Deliver one notification; True on success, False on failure."""

        raise NotImplementedError


_SUBJECTS = {
    NotificationKind.LEAVE_REQUEST_SUBMITTED: "New leave request from {employee_name}",
    NotificationKind.LEAVE_REQUEST_DECIDED: "Your leave request was {status}",
    NotificationKind.OVERTIME_REASON_SUBMITTED: "New {type} record from {employee_name}",
    NotificationKind.SCHEDULE_ASSIGNED: "You have been scheduled on {date}",
}


def render_subject(kind: NotificationKind, payload: Mapping) -> str:
    try:
        return _SUBJECTS[kind].format(**payload)
    except KeyError:
        return kind.value.replace("_", " ").capitalize()


def render_body(kind: NotificationKind, payload: Mapping) -> str:
    rows = "".join(
        f"<tr><td style='padding:4px 12px 4px 0'><b>{html.escape(str(key))}</b></td><td>{html.escape(str(value))}</td></tr>"
        for key, value in payload.items()
    )
    return f"<html><body><h3>{html.escape(render_subject(kind, payload))}</h3><table>{rows}</table></body></html>"


@dataclass(frozen=True)
class SmtpSettings:
    host: Optional[str]
    port: int
    user: Optional[str]
    password: Optional[str]
    sender: Optional[str] = None
    use_ssl: bool = True


class SmtpNotifier(Notifier):
    """E-mail notifier over SMTP. Never raises: failures are logged and reported as False."""

    def __init__(self, settings: SmtpSettings, *, timeout: float = 10.0):
        self._settings = settings
        self._timeout = timeout

    def notify(self, recipients: Sequence[str], kind: NotificationKind, payload: Mapping) -> bool:
        recipients = [r for r in recipients if r]
        if not recipients:
            logger.warning("No recipients for %s notification", kind.value)
            return False

        s = self._settings
        if not all([s.host, s.port, s.user, s.password]):
            logger.warning("Missing SMTP configuration, %s notification not sent", kind.value)
            return False

        msg = MIMEMultipart("alternative")
        msg["From"] = s.sender or s.user
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = render_subject(kind, payload)
        msg.attach(MIMEText(render_body(kind, payload), "html"))

        try:
            if s.use_ssl:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(s.host, int(s.port), context=context, timeout=self._timeout) as server:
                    server.login(s.user, s.password)
                    server.sendmail(msg["From"], recipients, msg.as_string())
            else:
                with smtplib.SMTP(s.host, int(s.port), timeout=self._timeout) as server:
                    server.starttls(context=ssl.create_default_context())
                    server.login(s.user, s.password)
                    server.sendmail(msg["From"], recipients, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send %s notification to %s: %s", kind.value, recipients, e)
            return False

        logger.info("Sent %s notification to %d recipient(s)", kind.value, len(recipients))
        return True
