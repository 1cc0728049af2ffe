"""SQLAlchemy model mirroring the quote JSON document."""
from __future__ import annotations

from sqlalchemy import BigInteger, Column, String, Text

from .session import Base


class QuoteRow(Base):
    __tablename__ = "quotes"

    id = Column(String(64), primary_key=True)
    name = Column(Text, nullable=False)
    text = Column(Text, nullable=False)
    type = Column(String(16), nullable=False, default="None")
    timestamp = Column(BigInteger, nullable=False, index=True)
