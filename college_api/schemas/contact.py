from typing import Optional

from .base import CamelModel


class ContactMessageCreate(CamelModel):
    # Emptiness is checked by the contact service so that a missing field
    # reports the same message as a blank one.
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
