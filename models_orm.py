from sqlalchemy import Column, String, Text
from database import Base
from datetime import datetime

# --- CLIENT STORAGE ---

class StoredValueORM(Base):
    """Durable key/value slot for headless clients (holds the bearer token)."""
    __tablename__ = "client_storage"

    key = Column(String, primary_key=True, index=True)
    value = Column(Text, nullable=False)
    updated_at = Column(String, default=lambda: datetime.utcnow().isoformat(),
                        onupdate=lambda: datetime.utcnow().isoformat())
