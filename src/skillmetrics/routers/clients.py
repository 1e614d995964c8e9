"""Clients API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import get_current_user, require_admin
from skillmetrics.models.user import User
from skillmetrics.schemas.project import Client, ClientCreate, ClientUpdate, Project
from skillmetrics.services.client_service import ClientService
from skillmetrics.services.project_service import ProjectService

router = APIRouter(prefix="/clients")


@router.get("", response_model=list[Client])
def list_clients(_: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[Client]:
    return [Client.model_validate(client) for client in ClientService(db).list_all()]


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreate, _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> Client:
    return Client.model_validate(ClientService(db).create(payload))


@router.get("/search", response_model=list[Client])
def search_clients(
    q: str = Query(..., min_length=1),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[Client]:
    return [Client.model_validate(client) for client in ClientService(db).search(q)]


@router.get("/{client_id}", response_model=Client)
def get_client(client_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Client:
    return Client.model_validate(ClientService(db).get(client_id))


@router.patch("/{client_id}", response_model=Client)
def update_client(
    client_id: int,
    payload: ClientUpdate,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Client:
    return Client.model_validate(ClientService(db).update(client_id, payload))


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: int, _: User = Depends(require_admin), db: Session = Depends(get_db)) -> None:
    """
    Delete a client.

    Raises:
        InvalidInputError (400): If the client still has projects.
        NotFoundError (404): If the client does not exist.
    """
    ClientService(db).delete(client_id)


@router.get("/{client_id}/projects", response_model=list[Project])
def list_client_projects(
    client_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[Project]:
    service = ProjectService(db)
    return [service.describe(project) for project in service.list_for_client(client_id)]
