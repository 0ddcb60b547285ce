# app/services/tickets.py

import logging
import re
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models import Service, TechAvailability, Ticket, TicketServices, User, utcnow
from app.schemas import HOUR_PATTERN, TicketStatus

logger = logging.getLogger(__name__)

_HOUR_RE = re.compile(HOUR_PATTERN)

# open -> in_progress -> encerrado, or open -> encerrado; encerrado is terminal
_TRANSITIONS = {
    TicketStatus.open: {TicketStatus.in_progress, TicketStatus.encerrado},
    TicketStatus.in_progress: {TicketStatus.encerrado},
    TicketStatus.encerrado: set(),
}


def is_valid_hour(value: str) -> bool:
    return isinstance(value, str) and _HOUR_RE.match(value) is not None


def can_transition(current: TicketStatus, new: TicketStatus) -> bool:
    return new in _TRANSITIONS.get(current, set())


def book_ticket(
    session: Session,
    client_id: int,
    tech_id: int,
    service_id: int,
    selected_hour: str,
    title: str,
    description: str,
) -> Ticket:
    """Open a ticket for ``client_id`` on the (tech, hour) slot with one service attached.

    Guards run in order and fail fast: hour format, active tech, active
    service, hour declared in the tech's availability, slot not held by
    another open ticket. The ticket and its service link are committed
    together.
    """
    # 0) Validate input before touching the database
    if not is_valid_hour(selected_hour):
        raise ValidationError("selected_hour must be in HH:MM format")
    if not title or not title.strip() or not description or not description.strip():
        raise ValidationError("title and description are required")

    # 1) Technician exists and is active
    tech = session.get(User, tech_id)
    if tech is None or tech.role != "tech" or not tech.active:
        raise NotFoundError("Tech not found")

    # 2) Service exists and is active
    service = session.get(Service, service_id)
    if service is None or not service.active:
        raise NotFoundError("Service not found")

    # 3) Hour is one the tech declared
    availability = session.get(TechAvailability, tech_id)
    if availability is None or selected_hour not in availability.available_hours:
        logger.warning("booking rejected tech_id=%s hour=%s reason=unavailable", tech_id, selected_hour)
        raise ValidationError("Hour unavailable for this tech")

    # 4) No other open ticket on the slot
    taken = session.exec(
        select(Ticket)
        .where(Ticket.tech_id == tech_id)
        .where(Ticket.selected_hour == selected_hour)
        .where(Ticket.status == TicketStatus.open.value)
    ).first()
    if taken is not None:
        logger.warning("booking rejected tech_id=%s hour=%s reason=slot_taken", tech_id, selected_hour)
        raise ConflictError("Slot already taken")

    # 5) Ticket and service link in one transaction
    ticket = Ticket(
        client_id=client_id,
        tech_id=tech_id,
        selected_hour=selected_hour,
        status=TicketStatus.open.value,
        title=title.strip(),
        description=description.strip(),
    )
    try:
        session.add(ticket)
        session.flush()  # fills ticket.id
        session.add(TicketServices(ticket_id=ticket.id, service_id=service_id))
        session.commit()
    except IntegrityError:
        # lost the race to a concurrent booking of the same slot
        session.rollback()
        logger.warning("booking rejected tech_id=%s hour=%s reason=slot_taken_on_commit", tech_id, selected_hour)
        raise ConflictError("Slot already taken")

    session.refresh(ticket)
    logger.info(
        "ticket booked id=%s client_id=%s tech_id=%s hour=%s service_id=%s",
        ticket.id, client_id, tech_id, selected_hour, service_id,
    )
    return ticket


def _get_mutable_ticket(session: Session, ticket_id: int) -> Ticket:
    ticket = session.get(Ticket, ticket_id)
    if ticket is None or ticket.status == TicketStatus.encerrado.value:
        raise NotFoundError("Ticket not found or closed")
    return ticket


def _ensure_can_manage(actor: User, ticket: Ticket):
    if actor.role == "admin":
        return
    if actor.role == "tech" and ticket.tech_id == actor.id:
        return
    raise ForbiddenError("You are not allowed to change this ticket")


def change_status(session: Session, actor: User, ticket_id: int, status) -> Ticket:
    ticket = _get_mutable_ticket(session, ticket_id)
    _ensure_can_manage(actor, ticket)

    new_status = TicketStatus(status)
    current = TicketStatus(ticket.status)
    if not can_transition(current, new_status):
        raise ConflictError(f"Cannot move ticket from {current.value} to {new_status.value}")

    ticket.status = new_status.value
    ticket.updated_at = utcnow()
    session.add(ticket)
    session.commit()
    session.refresh(ticket)

    logger.info(
        "ticket status changed id=%s %s -> %s by user_id=%s",
        ticket.id, current.value, new_status.value, actor.id,
    )
    return ticket


def add_service(session: Session, actor: User, ticket_id: int, service_id: int) -> Ticket:
    ticket = _get_mutable_ticket(session, ticket_id)

    service = session.get(Service, service_id)
    if service is None or not service.active:
        raise NotFoundError("Service not found or inactive")

    _ensure_can_manage(actor, ticket)

    existing = session.exec(
        select(TicketServices)
        .where(TicketServices.ticket_id == ticket.id)
        .where(TicketServices.service_id == service_id)
    ).first()
    if existing is not None:
        raise ConflictError("Service already attached to this ticket")

    session.add(TicketServices(ticket_id=ticket.id, service_id=service_id))
    ticket.updated_at = utcnow()
    session.add(ticket)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Service already attached to this ticket")

    session.refresh(ticket)
    logger.info("service attached ticket_id=%s service_id=%s by user_id=%s", ticket.id, service_id, actor.id)
    return ticket


def list_tickets(
    session: Session,
    client_id: Optional[int] = None,
    tech_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[Ticket]:
    stmt = select(Ticket)
    if client_id is not None:
        stmt = stmt.where(Ticket.client_id == client_id)
    if tech_id is not None:
        stmt = stmt.where(Ticket.tech_id == tech_id)
    if status is not None:
        stmt = stmt.where(Ticket.status == status)
    stmt = stmt.order_by(Ticket.created_at, Ticket.id)
    return list(session.exec(stmt).all())


def get_ticket_for(session: Session, actor: User, ticket_id: int) -> Ticket:
    ticket = session.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket not found")
    # other people's tickets look missing
    if actor.role == "tech" and ticket.tech_id != actor.id:
        raise NotFoundError("Ticket not found")
    if actor.role == "client" and ticket.client_id != actor.id:
        raise NotFoundError("Ticket not found")
    return ticket


def ticket_services(session: Session, ticket_id: int) -> List[Service]:
    return list(
        session.exec(
            select(Service)
            .join(TicketServices, TicketServices.service_id == Service.id)
            .where(TicketServices.ticket_id == ticket_id)
            .order_by(TicketServices.id)
        ).all()
    )


def delete_ticket(session: Session, ticket_id: int):
    ticket = session.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket not found")

    links = session.exec(select(TicketServices).where(TicketServices.ticket_id == ticket_id)).all()
    for link in links:
        session.delete(link)
    session.flush()
    session.delete(ticket)
    session.commit()
    logger.info("ticket deleted id=%s", ticket_id)


def to_public(session: Session, ticket: Ticket) -> dict:
    client = session.get(User, ticket.client_id)
    tech = session.get(User, ticket.tech_id)
    services = ticket_services(session, ticket.id)

    return {
        "id": ticket.id,
        "title": ticket.title,
        "description": ticket.description,
        "status": ticket.status,
        "selected_hour": ticket.selected_hour,
        "client_id": ticket.client_id,
        "client": client.name if client else None,
        "tech_id": ticket.tech_id,
        "tech": tech.name if tech else None,
        "tech_email": tech.email if tech else None,
        "services": [{"id": s.id, "name": s.name, "price": s.price} for s in services],
        "total": sum(s.price for s in services),
        "created_at": ticket.created_at,
        "updated_at": ticket.updated_at,
    }
