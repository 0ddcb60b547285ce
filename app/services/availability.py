# app/services/availability.py

import logging
from typing import List

from sqlmodel import Session, select

from app.errors import NotFoundError, ValidationError
from app.models import TechAvailability, Ticket, User, utcnow
from app.schemas import TicketStatus
from app.services.tickets import is_valid_hour

logger = logging.getLogger(__name__)


def set_availability(session: Session, tech_id: int, hours: List[str]) -> TechAvailability:
    """Replace the tech's declared hours. The previous set is discarded, not merged."""
    tech = session.get(User, tech_id)
    if tech is None or tech.role != "tech":
        raise NotFoundError("Tech not found")

    if not hours:
        raise ValidationError("available_hours cannot be empty")
    for hour in hours:
        if not is_valid_hour(hour):
            raise ValidationError("Hours must be in HH:MM format")

    # drop duplicates, keep the order the tech gave
    cleaned = list(dict.fromkeys(hours))

    # DB upsert: one availability row per tech (tech_id is PK)
    availability = session.get(TechAvailability, tech_id)
    if availability is None:
        availability = TechAvailability(tech_id=tech_id, available_hours=cleaned)
    else:
        availability.available_hours = cleaned
        availability.updated_at = utcnow()
    session.add(availability)
    session.commit()
    session.refresh(availability)

    logger.info("availability replaced tech_id=%s hours=%s", tech_id, len(cleaned))
    return availability


def get_hours(session: Session, tech_id: int) -> List[str]:
    availability = session.get(TechAvailability, tech_id)
    return list(availability.available_hours) if availability else []


def open_slots(session: Session, tech_id: int) -> List[str]:
    """Declared hours of an active tech that no open ticket holds."""
    tech = session.get(User, tech_id)
    if tech is None or tech.role != "tech" or not tech.active:
        raise NotFoundError("Tech not found")

    taken = set(
        session.exec(
            select(Ticket.selected_hour)
            .where(Ticket.tech_id == tech_id)
            .where(Ticket.status == TicketStatus.open.value)
        ).all()
    )
    return [hour for hour in get_hours(session, tech_id) if hour not in taken]
