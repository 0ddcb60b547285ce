# app/services/catalog.py

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models import Service, TicketServices

logger = logging.getLogger(__name__)


def _name_taken(session: Session, name: str, exclude_id: int = None) -> bool:
    stmt = select(Service).where(Service.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Service.id != exclude_id)
    return session.exec(stmt).first() is not None


def create_service(session: Session, name: str, price: float) -> Service:
    name = name.strip()
    if _name_taken(session, name):
        raise ConflictError("A service with this name already exists")

    service = Service(name=name, price=price)
    session.add(service)
    try:
        session.commit()
    except IntegrityError:
        # a concurrent create took the name
        session.rollback()
        raise ConflictError("A service with this name already exists")
    session.refresh(service)
    logger.info("service created id=%s", service.id)
    return service


def list_services(session: Session, active_only: bool = False) -> List[Service]:
    stmt = select(Service)
    if active_only:
        stmt = stmt.where(Service.active == True)  # noqa: E712
    return list(session.exec(stmt.order_by(Service.name)).all())


def get_service(session: Session, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return service


def update_service(session: Session, service_id: int, changes: dict) -> Service:
    service = get_service(session, service_id)
    changes = {field: value for field, value in changes.items() if value is not None}
    if not changes:
        raise ValidationError("Nothing to update")

    name = changes.get("name")
    if name is not None:
        changes["name"] = name.strip()
        if _name_taken(session, changes["name"], exclude_id=service.id):
            raise ConflictError("A service with this name already exists")

    for field, value in changes.items():
        setattr(service, field, value)
    session.add(service)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("A service with this name already exists")
    session.refresh(service)
    logger.info("service updated id=%s fields=%s", service.id, sorted(changes))
    return service


def delete_service(session: Session, service_id: int):
    service = get_service(session, service_id)

    in_use = session.exec(
        select(TicketServices).where(TicketServices.service_id == service_id)
    ).first()
    if in_use is not None:
        raise ConflictError("Service is attached to tickets; deactivate it instead")

    session.delete(service)
    session.commit()
    logger.info("service deleted id=%s", service_id)
