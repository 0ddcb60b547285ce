# app/routers/users_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db import get_session
from app.models import User
from app.schemas import UserCreate, UserPublic
from app.auth import get_current_user
from app.services import users as user_service

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/clients", status_code=201, response_model=UserPublic)
def register_client(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    return user_service.create_user(
        session,
        name=user.name,
        email=user.email,
        password=user.password,
        role="client",
    )
