import smtplib
from fastapi import Request
from email.message import EmailMessage

from library_api.core.config import Settings
from library_api.core.logging import get_logger
from library_api.services.author_service import AuthorEmailChanged

logger = get_logger(__name__)

SUBJECT = "email notification"
BODY = "Author information updated"


class EmailNotifier:
    """
    Best-effort SMTP sender for author email changes.
    Delivery problems are logged and never propagate.
    """

    def __init__(
        self,
        host: str | None,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        sender: str = "library@localhost",
        recipient: str = "admin@localhost",
        timeout: float = 10.0,
    ):
        self.host: str | None = host
        self.port: int = port
        self.username: str | None = username
        self.password: str | None = password
        self.sender: str = sender
        self.recipient: str = recipient
        self.timeout: float = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailNotifier":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            sender=settings.NOTIFY_SENDER,
            recipient=settings.NOTIFY_RECIPIENT,
            timeout=settings.SMTP_TIMEOUT,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def build_message(self) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = SUBJECT
        message.set_content(BODY)
        return message

    def send_author_updated(self, event: AuthorEmailChanged) -> bool:
        """Returns True when the SMTP server accepted the message."""
        if not self.enabled:
            logger.info(
                "SMTP not configured, skipping notice for author %s (%s -> %s)",
                event.author_id, event.old_email, event.new_email,
            )
            return False

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(self.build_message())
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email-change notice for author %s", event.author_id)
            return False

        logger.info("Sent email-change notice for author %s to %s", event.author_id, self.recipient)
        return True


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier
