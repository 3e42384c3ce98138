from sqlalchemy import Column, Integer, String, Text, DateTime, func
from database import Base


class Collection(Base):
    """One named collection (production, users, off_days, logs, settings) stored as a JSON document."""

    __tablename__ = "collections"

    name = Column(String, primary_key=True)
    payload = Column(Text, nullable=False, default="[]")
    version = Column(Integer, nullable=False, default=1)  # bumped on every write
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
