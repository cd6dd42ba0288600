import sys
from blog.core.config import get_settings
from blog.services.email import ContactDeliveryError, send_contact_email

def check_smtp():
    settings = get_settings()

    print(f"Testing with Server: {settings.MAIL_SERVER}, Port: {settings.MAIL_PORT}, SSL: {settings.MAIL_SSL}")
    print(f"Username: {settings.MAIL_USERNAME}")
    print(f"Delivering to: {settings.CONTACT_EMAIL}")

    try:
        message_id = send_contact_email(
            settings,
            name="SMTP Check",
            email=settings.MAIL_USERNAME,
            subject="SMTP Test",
            message="If you can read this, the contact form can reach you.",
        )
    except ContactDeliveryError as e:
        print(f"Failed ({e.kind}): {e.public_message}")
        print(e.reason)
        sys.exit(1)

    print(f"Success! Email sent as {message_id}")

if __name__ == "__main__":
    check_smtp()
