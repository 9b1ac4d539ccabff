from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.base import success
from ..schemas.contact import ContactMessageCreate
from ..services.contact import submit_message
from ..services.mailer import Mailer, get_mailer

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("")
async def send_message(
    payload: ContactMessageCreate,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer)
):
    """Public contact form: store the message and relay it to the inbox"""
    await submit_message(db, mailer, payload)
    return success(message="Message sent successfully!")
