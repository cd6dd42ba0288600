import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from blog.core.config import Settings, get_settings
from blog.services.email import ContactDeliveryError, send_contact_email

logger = logging.getLogger(__name__)

router = APIRouter()


class ContactForm(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


@router.post("")
def submit_contact_form(form: ContactForm, settings: Settings = Depends(get_settings)):
    try:
        message_id = send_contact_email(settings, form.name, form.email, form.subject, form.message)
    except ContactDeliveryError as e:
        logger.error("Contact email failed (%s): %s", e.kind, e.reason)
        content = {"detail": e.public_message}
        if not settings.is_production:
            content["details"] = e.reason
        return JSONResponse(status_code=500, content=content)

    logger.info("Contact form from %s relayed as %s", form.email, message_id)
    return {
        "success": True,
        "message": "Email sent successfully",
        "messageId": message_id,
    }
