from sqlalchemy import Column, DateTime, String, Text, func

from protrack.database import Base


class SessionState(Base):
    __tablename__ = "session_state"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
