# app/models.py

from typing import Optional, List
from datetime import datetime, timezone

from sqlalchemy import Index, UniqueConstraint, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str = Field(index=True)  # admin, tech or client
    active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    price: float
    active: bool = True
    created_at: datetime = Field(default_factory=utcnow)


class TechAvailability(SQLModel, table=True):
    # one row per tech, replaced wholesale on update
    tech_id: int = Field(foreign_key="user.id", primary_key=True)
    available_hours: List[str] = Field(sa_column=Column(JSON, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow)


class Ticket(SQLModel, table=True):
    __table_args__ = (
        # at most one open ticket per (tech, hour)
        Index(
            "uq_ticket_open_slot",
            "tech_id",
            "selected_hour",
            unique=True,
            sqlite_where=text("status = 'open'"),
            postgresql_where=text("status = 'open'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="user.id", index=True)
    tech_id: int = Field(foreign_key="user.id", index=True)
    selected_hour: str
    status: str = Field(default="open", index=True)  # open, in_progress or encerrado
    title: str
    description: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


class TicketServices(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("ticket_id", "service_id", name="uq_ticket_service"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    ticket_id: int = Field(foreign_key="ticket.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
