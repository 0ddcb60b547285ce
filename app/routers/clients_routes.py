# app/routers/clients_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db import get_session
from app.deps import client_only
from app.models import User
from app.schemas import (
    ProfileUpdate,
    ServicePublic,
    SlotsResponse,
    TechPublic,
    TicketCreate,
    TicketPublic,
    TicketStatus,
    UserPublic,
)
from app.services import availability as availability_service
from app.services import catalog as catalog_service
from app.services import tickets as ticket_service
from app.services import users as user_service

router = APIRouter(
    prefix="/client",
    tags=["client"],
)


@router.get("/profile", response_model=UserPublic)
def get_profile(current_user: User = Depends(client_only)):
    return current_user


@router.patch("/profile", response_model=UserPublic)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    return user_service.update_profile(session, current_user, **payload.model_dump())


@router.get("/techs", response_model=List[TechPublic])
def list_techs(
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    techs = [t for t in user_service.list_users(session, "tech") if t.active]
    return [
        {**UserPublic.model_validate(t).model_dump(), "available_hours": availability_service.get_hours(session, t.id)}
        for t in techs
    ]


@router.get("/techs/{tech_id}/slots", response_model=SlotsResponse)
def tech_open_slots(
    tech_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    return {"tech_id": tech_id, "open_slots": availability_service.open_slots(session, tech_id)}


@router.get("/services", response_model=List[ServicePublic])
def list_services(
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    return catalog_service.list_services(session, active_only=True)


@router.post("/tickets", response_model=TicketPublic, status_code=201)
def book_ticket(
    payload: TicketCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    ticket = ticket_service.book_ticket(
        session,
        client_id=current_user.id,
        tech_id=payload.tech_id,
        service_id=payload.service_id,
        selected_hour=payload.selected_hour,
        title=payload.title,
        description=payload.description,
    )
    return ticket_service.to_public(session, ticket)


@router.get("/tickets", response_model=List[TicketPublic])
def list_my_tickets(
    status: Optional[TicketStatus] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    tickets = ticket_service.list_tickets(
        session,
        client_id=current_user.id,
        status=status.value if status else None,
    )
    return [ticket_service.to_public(session, t) for t in tickets]


@router.get("/tickets/{ticket_id}", response_model=TicketPublic)
def show_ticket(
    ticket_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(client_only),
):
    ticket = ticket_service.get_ticket_for(session, current_user, ticket_id)
    return ticket_service.to_public(session, ticket)
