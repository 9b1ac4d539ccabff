from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from ..database import Base


class ContactMessage(Base):
    """Append-only log of messages submitted through the public contact form"""
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
