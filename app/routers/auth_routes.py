# app/routers/auth_routes.py

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from app.db import get_session
from app.schemas import Token
from app.auth import token_for
from app.services import users as user_service

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # OAuth2 form calls the email field "username"
    user = user_service.authenticate(session, form_data.username, form_data.password)
    return {"access_token": token_for(user), "token_type": "bearer"}
