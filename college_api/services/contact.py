"""
Public contact form intake.

The message is committed before the relay is attempted, so a relay failure is
reported to the caller even though the message itself was kept.
"""

import logging

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from ..config import settings
from ..core.exceptions import InternalError, InvalidArgument
from ..models.contact import ContactMessage
from ..schemas.contact import ContactMessageCreate
from .mailer import Mailer

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields (name, email, subject, message) are required"
INVALID_EMAIL_MESSAGE = "Please provide a valid email address"
MULTILINE_HEADER_MESSAGE = "Name and subject must be a single line"

_email_adapter = TypeAdapter(EmailStr)

MAIL_TEMPLATE = """You have received a new message from the contact form.

Name: {name}
Email: {email}
Subject: {subject}

Message:
{message}
"""


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


async def submit_message(db: Session, mailer: Mailer, payload: ContactMessageCreate) -> ContactMessage:
    name = _clean(payload.name)
    email = _clean(payload.email)
    subject = _clean(payload.subject)
    body = _clean(payload.message)
    if not (name and email and subject and body):
        raise InvalidArgument(REQUIRED_FIELDS_MESSAGE)

    # name, subject and email end up in mail headers
    if any(char in value for value in (name, subject) for char in "\r\n"):
        raise InvalidArgument(MULTILINE_HEADER_MESSAGE)
    try:
        email = _email_adapter.validate_python(email)
    except ValidationError:
        raise InvalidArgument(INVALID_EMAIL_MESSAGE)

    contact = ContactMessage(name=name, email=email, subject=subject, message=body)
    db.add(contact)
    db.commit()
    db.refresh(contact)

    inbox = settings.contact_inbox or mailer.sender
    try:
        await mailer.send(
            to_email=inbox,
            subject=f"New Contact Form: {subject}",
            body=MAIL_TEMPLATE.format(name=name, email=email, subject=subject, message=body),
            reply_to=email,
        )
    except Exception as e:
        logger.error("Failed to relay contact message %s: %s", contact.id, e)
        raise InternalError("Failed to send message", detail=str(e))

    logger.info("Contact message %s relayed to %s", contact.id, inbox)
    return contact
