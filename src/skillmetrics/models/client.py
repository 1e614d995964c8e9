"""Client database model."""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base


class Client(Base):
    """
    Client model representing a customer organisation that owns projects.

    Attributes:
        id: Primary key
        name: Client name
        industry: Industry sector
        contact_name: Primary contact
        contact_email: Primary contact email
        contact_phone: Primary contact phone
        website: Client website URL
        logo_url: Logo image URL
        notes: Free-text notes
        created_at: Timestamp when record was created
        updated_at: Timestamp of the last modification
    """

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    industry = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    website = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of Client."""
        return f"<Client(id={self.id}, name='{self.name}')>"
