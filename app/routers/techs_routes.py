# app/routers/techs_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db import get_session
from app.deps import tech_only
from app.models import User
from app.schemas import (
    AvailabilityPublic,
    AvailabilityUpdate,
    ProfileUpdate,
    ServicePublic,
    TicketPublic,
    TicketServiceAdd,
    TicketStatus,
    TicketStatusUpdate,
    UserPublic,
)
from app.services import availability as availability_service
from app.services import catalog as catalog_service
from app.services import tickets as ticket_service
from app.services import users as user_service

router = APIRouter(
    prefix="/tech",
    tags=["tech"],
)


@router.get("/profile", response_model=UserPublic)
def get_profile(current_user: User = Depends(tech_only)):
    return current_user


@router.patch("/profile", response_model=UserPublic)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    return user_service.update_profile(session, current_user, **payload.model_dump())


@router.get("/availability", response_model=AvailabilityPublic)
def get_my_availability(
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    return {
        "tech_id": current_user.id,
        "available_hours": availability_service.get_hours(session, current_user.id),
    }


@router.put("/availability", response_model=AvailabilityPublic)
def replace_my_availability(
    payload: AvailabilityUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    return availability_service.set_availability(session, current_user.id, payload.available_hours)


@router.get("/services", response_model=List[ServicePublic])
def list_services(
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    return catalog_service.list_services(session, active_only=True)


@router.get("/tickets", response_model=List[TicketPublic])
def list_assigned_tickets(
    status: Optional[TicketStatus] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    tickets = ticket_service.list_tickets(
        session,
        tech_id=current_user.id,
        status=status.value if status else None,
    )
    return [ticket_service.to_public(session, t) for t in tickets]


@router.get("/tickets/{ticket_id}", response_model=TicketPublic)
def show_ticket(
    ticket_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    ticket = ticket_service.get_ticket_for(session, current_user, ticket_id)
    return ticket_service.to_public(session, ticket)


@router.post("/tickets/{ticket_id}/services", response_model=TicketPublic)
def add_service_to_ticket(
    ticket_id: int,
    payload: TicketServiceAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    ticket = ticket_service.add_service(session, current_user, ticket_id, payload.service_id)
    return ticket_service.to_public(session, ticket)


@router.patch("/tickets/{ticket_id}/status", response_model=TicketPublic)
def update_ticket_status(
    ticket_id: int,
    payload: TicketStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(tech_only),
):
    ticket = ticket_service.change_status(session, current_user, ticket_id, payload.status)
    return ticket_service.to_public(session, ticket)
