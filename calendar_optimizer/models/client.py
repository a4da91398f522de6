# calendar_optimizer/models/client.py
"""Client profile data used to resolve display names."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from ..database import Base


class ClientProfile(Base):
    __tablename__ = "client_profiles"

    user_id = Column(String(26), primary_key=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<ClientProfile {self.user_id} {self.first_name}>"
