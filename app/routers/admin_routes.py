# app/routers/admin_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db import get_session
from app.deps import admin_only
from app.models import User
from app.schemas import (
    AdminAvailabilityUpdate,
    AvailabilityPublic,
    Message,
    ServiceCreate,
    ServicePublic,
    ServiceUpdate,
    TechPublic,
    TicketPublic,
    TicketServiceAdd,
    TicketStatus,
    TicketStatusUpdate,
    UserAdminUpdate,
    UserCreate,
    UserPublic,
)
from app.services import availability as availability_service
from app.services import catalog as catalog_service
from app.services import tickets as ticket_service
from app.services import users as user_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(admin_only)],
)


def _tech_public(session: Session, tech: User) -> dict:
    return {
        **UserPublic.model_validate(tech).model_dump(),
        "available_hours": availability_service.get_hours(session, tech.id),
    }


# --- techs ---

@router.post("/tech", response_model=TechPublic, status_code=201)
def create_tech(payload: UserCreate, session: Session = Depends(get_session)):
    tech = user_service.create_user(
        session,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role="tech",
    )
    return _tech_public(session, tech)


@router.get("/tech", response_model=List[TechPublic])
def list_techs(session: Session = Depends(get_session)):
    return [_tech_public(session, t) for t in user_service.list_users(session, "tech")]


@router.patch("/tech/{tech_id}", response_model=TechPublic)
def update_tech(tech_id: int, payload: UserAdminUpdate, session: Session = Depends(get_session)):
    tech = user_service.admin_update_user(session, tech_id, "tech", payload.model_dump(exclude_unset=True))
    return _tech_public(session, tech)


@router.delete("/tech/{tech_id}", response_model=TechPublic)
def deactivate_tech(tech_id: int, session: Session = Depends(get_session)):
    tech = user_service.deactivate_tech(session, tech_id)
    return _tech_public(session, tech)


@router.post("/tech/availability", response_model=AvailabilityPublic)
def set_tech_availability(payload: AdminAvailabilityUpdate, session: Session = Depends(get_session)):
    return availability_service.set_availability(session, payload.tech_id, payload.available_hours)


@router.get("/tech/{tech_id}/availability", response_model=AvailabilityPublic)
def get_tech_availability(tech_id: int, session: Session = Depends(get_session)):
    user_service.get_user(session, tech_id, "tech")
    return {"tech_id": tech_id, "available_hours": availability_service.get_hours(session, tech_id)}


# --- services ---

@router.post("/service", response_model=ServicePublic, status_code=201)
def create_service(payload: ServiceCreate, session: Session = Depends(get_session)):
    return catalog_service.create_service(session, payload.name, payload.price)


@router.get("/service", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return catalog_service.list_services(session)


@router.patch("/service/{service_id}", response_model=ServicePublic)
def update_service(service_id: int, payload: ServiceUpdate, session: Session = Depends(get_session)):
    return catalog_service.update_service(session, service_id, payload.model_dump(exclude_unset=True))


@router.delete("/service/{service_id}", response_model=Message)
def delete_service(service_id: int, session: Session = Depends(get_session)):
    catalog_service.delete_service(session, service_id)
    return {"message": "Service deleted"}


# --- clients ---

@router.get("/client", response_model=List[UserPublic])
def list_clients(session: Session = Depends(get_session)):
    return user_service.list_users(session, "client")


@router.patch("/client/{client_id}", response_model=UserPublic)
def update_client(client_id: int, payload: UserAdminUpdate, session: Session = Depends(get_session)):
    return user_service.admin_update_user(session, client_id, "client", payload.model_dump(exclude_unset=True))


@router.delete("/client/{client_id}", response_model=Message)
def delete_client(client_id: int, session: Session = Depends(get_session)):
    user_service.delete_client(session, client_id)
    return {"message": "Client deleted"}


# --- tickets ---

@router.get("/ticket", response_model=List[TicketPublic])
def list_tickets(
    status: Optional[TicketStatus] = None,
    tech_id: Optional[int] = None,
    client_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    tickets = ticket_service.list_tickets(
        session,
        client_id=client_id,
        tech_id=tech_id,
        status=status.value if status else None,
    )
    return [ticket_service.to_public(session, t) for t in tickets]


@router.get("/ticket/{ticket_id}", response_model=TicketPublic)
def show_ticket(
    ticket_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(admin_only),
):
    ticket = ticket_service.get_ticket_for(session, current_user, ticket_id)
    return ticket_service.to_public(session, ticket)


@router.patch("/ticket/{ticket_id}/status", response_model=TicketPublic)
def update_ticket_status(
    ticket_id: int,
    payload: TicketStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(admin_only),
):
    ticket = ticket_service.change_status(session, current_user, ticket_id, payload.status)
    return ticket_service.to_public(session, ticket)


@router.post("/ticket/{ticket_id}/services", response_model=TicketPublic)
def add_service_to_ticket(
    ticket_id: int,
    payload: TicketServiceAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(admin_only),
):
    ticket = ticket_service.add_service(session, current_user, ticket_id, payload.service_id)
    return ticket_service.to_public(session, ticket)


@router.delete("/ticket/{ticket_id}", response_model=Message)
def delete_ticket(ticket_id: int, session: Session = Depends(get_session)):
    ticket_service.delete_ticket(session, ticket_id)
    return {"message": "Ticket deleted"}
