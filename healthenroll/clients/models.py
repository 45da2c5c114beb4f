"""
Client Model - Stores client-specific profile information.

This model extends the base User model with the personal details collected
at registration.
"""
from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


class ClientProfile(Base):
    """
    Client Model - Stores client-specific information

    Fields:
    - id: Primary key for client profile
    - user_id: Foreign key to User.user_id
    - first_name / last_name: Client's name
    - date_of_birth: Optional date of birth
    - gender: Client's gender
    - phone: Optional contact number
    - address: Optional postal address
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(50), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)

    user = relationship("User", back_populates="client_profile")

    def __repr__(self):
        return f"<ClientProfile(id={self.id}, user_id='{self.user_id}')>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
