# app/schemas.py

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

HOUR_PATTERN = r"^([0-1]\d|2[0-3]):([0-5]\d)$"

HourStr = Annotated[str, Field(pattern=HOUR_PATTERN)]


def strip_text(value):
    return value.strip() if isinstance(value, str) else value


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    admin = "admin"
    tech = "tech"
    client = "client"


class TicketStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    encerrado = "encerrado"  # closed, terminal


class Message(BaseModel):
    message: str


# --- users ---

class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    active: bool

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    current_password: Optional[str] = Field(default=None, min_length=6, max_length=72)
    new_password: Optional[str] = Field(default=None, min_length=6, max_length=72)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)

    @model_validator(mode="after")
    def current_password_required(self):
        if self.new_password and not self.current_password:
            raise ValueError("current_password is required to set a new password")
        return self


class UserAdminUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class TechPublic(UserPublic):
    available_hours: List[str] = []


# --- services catalog ---

class ServiceCreate(BaseModel):
    name: str = Field(min_length=3)
    price: float = Field(gt=0)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    price: Optional[float] = Field(default=None, gt=0)
    active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)


class ServicePublic(BaseModel):
    id: int
    name: str
    price: float
    active: bool

    model_config = {"from_attributes": True}


# --- availability ---

class AvailabilityUpdate(BaseModel):
    available_hours: List[HourStr] = Field(min_length=1)


class AdminAvailabilityUpdate(AvailabilityUpdate):
    tech_id: int


class AvailabilityPublic(BaseModel):
    tech_id: int
    available_hours: List[str]

    model_config = {"from_attributes": True}


class SlotsResponse(BaseModel):
    tech_id: int
    open_slots: List[str]


# --- tickets ---

class TicketCreate(BaseModel):
    tech_id: int
    service_id: int
    selected_hour: HourStr
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)


class TicketStatusUpdate(BaseModel):
    status: Literal["in_progress", "encerrado"]


class TicketServiceAdd(BaseModel):
    service_id: int


class ServiceLine(BaseModel):
    id: int
    name: str
    price: float


class TicketPublic(BaseModel):
    id: int
    title: str
    description: str
    status: TicketStatus
    selected_hour: str
    client_id: int
    client: Optional[str] = None
    tech_id: int
    tech: Optional[str] = None
    tech_email: Optional[str] = None
    services: List[ServiceLine] = []
    total: float = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
