import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from html import escape

from blog.core.config import Settings

logger = logging.getLogger(__name__)


class ContactDeliveryError(Exception):
    AUTH = "auth"
    CONNECTION = "connection"
    UNKNOWN = "unknown"

    MESSAGES = {
        AUTH: "Email authentication failed. Please check your email credentials.",
        CONNECTION: "Could not connect to email server. Please check your network connection.",
        UNKNOWN: "Failed to send email",
    }

    def __init__(self, kind: str, reason: str):
        super().__init__(reason)
        self.kind = kind
        self.reason = reason

    @property
    def public_message(self) -> str:
        return self.MESSAGES.get(self.kind, self.MESSAGES[self.UNKNOWN])


def format_contact_html(name: str, email: str, subject: str, message: str) -> str:
    name, email, subject, message = (escape(v) for v in (name, email, subject, message))
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #2563eb;">New Contact Form Submission</h2>
        <div style="background: #f8fafc; padding: 20px; border-radius: 8px;">
            <p><strong>Name:</strong> {name}</p>
            <p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>
            <p><strong>Subject:</strong> {subject}</p>
        </div>
        <div style="margin-top: 20px;">
            <h3 style="color: #374151;">Message:</h3>
            <div style="background: #f1f5f9; padding: 15px; border-radius: 6px; white-space: pre-wrap;">{message}</div>
        </div>
        <hr style="margin: 30px 0; border: none; border-top: 1px solid #e2e8f0;">
        <p style="color: #64748b; font-size: 12px;">
            This email was sent from your blog contact form.
        </p>
    </div>
    """


def format_contact_text(name: str, email: str, subject: str, message: str) -> str:
    return (
        "New Contact Form Submission\n\n"
        f"Name: {name}\n"
        f"Email: {email}\n"
        f"Subject: {subject}\n\n"
        "Message:\n"
        f"{message}\n\n"
        "---\n"
        "Sent from your blog contact form.\n"
    )


def build_contact_message(settings: Settings, name: str, email: str, subject: str, message: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = formataddr(("Blog Contact Form", settings.MAIL_USERNAME))
    msg["To"] = settings.CONTACT_EMAIL
    # Replies go straight back to whoever filled in the form
    msg["Reply-To"] = email
    msg["Subject"] = f"[Blog Contact] {subject}"
    domain = settings.MAIL_USERNAME.rpartition("@")[2] or None
    msg["Message-ID"] = make_msgid(domain=domain)

    msg.attach(MIMEText(format_contact_text(name, email, subject, message), "plain", "utf-8"))
    msg.attach(MIMEText(format_contact_html(name, email, subject, message), "html", "utf-8"))
    return msg


def _connect(settings: Settings) -> smtplib.SMTP:
    if settings.MAIL_SSL:
        logger.debug("Connecting to %s:%s via SSL", settings.MAIL_SERVER, settings.MAIL_PORT)
        return smtplib.SMTP_SSL(settings.MAIL_SERVER, settings.MAIL_PORT, timeout=settings.MAIL_TIMEOUT)

    logger.debug("Connecting to %s:%s via STARTTLS", settings.MAIL_SERVER, settings.MAIL_PORT)
    server = smtplib.SMTP(settings.MAIL_SERVER, settings.MAIL_PORT, timeout=settings.MAIL_TIMEOUT)
    try:
        server.starttls()
    except Exception:
        server.close()
        raise
    return server


def _verify_transport(server: smtplib.SMTP, settings: Settings):
    """Make sure the server is talking to us and accepts our credentials before sending."""
    code, _ = server.noop()
    if code != 250:
        raise smtplib.SMTPResponseException(code, "SMTP server did not accept NOOP")
    if settings.MAIL_USERNAME:
        server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)


def send_contact_email(settings: Settings, name: str, email: str, subject: str, message: str) -> str:
    """Relay a contact form submission to the operator inbox and return its Message-ID."""
    msg = build_contact_message(settings, name, email, subject, message)

    try:
        with _connect(settings) as server:
            _verify_transport(server, settings)
            server.sendmail(settings.MAIL_USERNAME, [settings.CONTACT_EMAIL], msg.as_string())
    except smtplib.SMTPAuthenticationError as e:
        raise ContactDeliveryError(ContactDeliveryError.AUTH, str(e)) from e
    except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as e:
        raise ContactDeliveryError(ContactDeliveryError.CONNECTION, str(e)) from e
    except smtplib.SMTPException as e:
        raise ContactDeliveryError(ContactDeliveryError.UNKNOWN, str(e)) from e
    except OSError as e:
        # Refused connections, DNS failures and timeouts
        raise ContactDeliveryError(ContactDeliveryError.CONNECTION, str(e)) from e

    logger.info("Contact email sent: %s", msg["Message-ID"])
    return msg["Message-ID"]
