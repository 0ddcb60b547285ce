# app/services/users.py

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.auth import hash_password, verify_password
from app.config import Settings
from app.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.models import Ticket, TicketServices, User, utcnow

logger = logging.getLogger(__name__)


def _email_taken(session: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(User).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return session.exec(stmt).first() is not None


def create_user(session: Session, name: str, email: str, password: str, role: str) -> User:
    email = email.strip().lower()

    # 1) Check if email already exists
    if _email_taken(session, email):
        raise ConflictError("Email already registered")

    # 2) Create user in DB
    db_user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    session.add(db_user)
    try:
        session.commit()
    except IntegrityError:
        # a concurrent registration took the email
        session.rollback()
        raise ConflictError("Email already registered")
    session.refresh(db_user)  # fills db_user.id

    logger.info("user created id=%s role=%s", db_user.id, role)
    return db_user


def authenticate(session: Session, email: str, password: str) -> User:
    user = session.exec(
        select(User).where(User.email == email.strip().lower())
    ).first()

    if user is None or not user.active or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


def get_user(session: Session, user_id: int, role: Optional[str] = None) -> User:
    user = session.get(User, user_id)
    if user is None or (role is not None and user.role != role):
        raise NotFoundError(f"{(role or 'user').capitalize()} not found")
    return user


def list_users(session: Session, role: str) -> List[User]:
    return list(
        session.exec(select(User).where(User.role == role).order_by(User.id)).all()
    )


def update_profile(
    session: Session,
    user: User,
    name: Optional[str] = None,
    current_password: Optional[str] = None,
    new_password: Optional[str] = None,
) -> User:
    changed = False

    if new_password:
        if not current_password or not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")
        user.password_hash = hash_password(new_password)
        changed = True

    if name:
        user.name = name.strip()
        changed = True

    if not changed:
        raise ValidationError("Nothing to update")

    user.updated_at = utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def admin_update_user(session: Session, user_id: int, role: str, changes: dict) -> User:
    user = get_user(session, user_id, role)
    changes = {field: value for field, value in changes.items() if value is not None}
    if not changes:
        raise ValidationError("Nothing to update")

    email = changes.get("email")
    if email is not None and _email_taken(session, email, exclude_id=user.id):
        raise ConflictError("Email already registered")

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = utcnow()
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Email already registered")
    session.refresh(user)

    logger.info("user updated id=%s fields=%s", user.id, sorted(changes))
    return user


def deactivate_tech(session: Session, tech_id: int) -> User:
    # techs keep their ticket history, so they are disabled rather than removed
    tech = get_user(session, tech_id, "tech")
    tech.active = False
    tech.updated_at = utcnow()
    session.add(tech)
    session.commit()
    session.refresh(tech)
    logger.info("tech deactivated id=%s", tech.id)
    return tech


def delete_client(session: Session, client_id: int):
    """Delete a client together with their tickets and ticket-service links."""
    client = get_user(session, client_id, "client")

    ticket_ids = [
        t.id for t in session.exec(select(Ticket).where(Ticket.client_id == client_id)).all()
    ]
    if ticket_ids:
        links = session.exec(
            select(TicketServices).where(TicketServices.ticket_id.in_(ticket_ids))
        ).all()
        for link in links:
            session.delete(link)
        session.flush()
        for ticket_id in ticket_ids:
            session.delete(session.get(Ticket, ticket_id))
        session.flush()

    session.delete(client)
    session.commit()
    logger.info("client deleted id=%s tickets_removed=%s", client_id, len(ticket_ids))


def ensure_admin(session: Session, settings: Settings) -> Optional[User]:
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return None
    existing = session.exec(
        select(User).where(User.email == settings.ADMIN_EMAIL.lower())
    ).first()
    if existing is not None:
        return existing
    return create_user(
        session,
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        role="admin",
    )
