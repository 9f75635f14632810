"""
api.accounts
============

Sign‑up and login.  Both return the public user profile; password hashes
never leave the engine.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from tsfclub import auth
from tsfclub.store import EntityStore

from .deps import get_store

router = APIRouter(prefix="/auth", tags=["auth"])


class SignupRequest(BaseModel):
    name: str
    email: str
    password: str
    confirm_password: str
    college_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/signup", status_code=201)
def signup(data: SignupRequest, store: EntityStore = Depends(get_store)):
    user = auth.register_user(
        store,
        data.name,
        data.email,
        data.password,
        data.confirm_password,
        college_id=data.college_id,
    )
    return user.public_profile()


@router.post("/login")
def login(data: LoginRequest, store: EntityStore = Depends(get_store)):
    user = auth.authenticate(store, data.email, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return user.public_profile()
