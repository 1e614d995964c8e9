"""Client directory service."""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillmetrics.exceptions import InvalidInputError, NotFoundError
from skillmetrics.models.client import Client
from skillmetrics.models.project import Project
from skillmetrics.schemas.project import ClientCreate, ClientUpdate
from skillmetrics.utils import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


class ClientService:
    """Service for client organisations."""

    def __init__(self, db: Session) -> None:
        """
        Initialize the client service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def list_all(self) -> list[Client]:
        return self.db.query(Client).order_by(Client.name).all()

    def get(self, client_id: int) -> Client:
        """
        Fetch a client by ID.

        Raises:
            NotFoundError: If the client does not exist
        """
        client = self.db.get(Client, client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    def search(self, query: str) -> list[Client]:
        """Case-insensitive substring search over name, industry and contact name."""
        pattern = contains_pattern(query)
        return (
            self.db.query(Client)
            .filter(
                or_(
                    Client.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Client.industry.ilike(pattern, escape=LIKE_ESCAPE),
                    Client.contact_name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(Client.name)
            .all()
        )

    def create(self, data: ClientCreate) -> Client:
        client = Client(**data.model_dump())
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        logger.info("Created client %s (%s)", client.id, client.name)
        return client

    def update(self, client_id: int, data: ClientUpdate) -> Client:
        client = self.get(client_id)
        for field, value in data.changes().items():
            setattr(client, field, value)
        self.db.commit()
        self.db.refresh(client)
        return client

    def delete(self, client_id: int) -> None:
        """
        Delete a client that has no projects.

        Raises:
            NotFoundError: If the client does not exist
            InvalidInputError: If projects still reference the client
        """
        client = self.get(client_id)
        project_count = self.db.query(Project).filter(Project.client_id == client_id).count()
        if project_count:
            raise InvalidInputError("Cannot delete client with associated projects")
        self.db.delete(client)
        self.db.commit()
        logger.info("Deleted client %s", client_id)
