"""
User endpoints for API v1.

Registration and login.  Both routes are subject to the tighter
authentication request budget in addition to the global one.
"""

import sqlite3

from fastapi import APIRouter, Depends, status

from trip_planner_api.app.core.db import get_connection
from trip_planner_api.app.core.rate_limit import enforce_auth_limit
from trip_planner_api.app.schemas.user import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from trip_planner_api.app.services.user_service import UserService


router = APIRouter(dependencies=[Depends(enforce_auth_limit)])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: RegisterRequest,
    conn: sqlite3.Connection = Depends(get_connection),
) -> RegisterResponse:
    """Register a new account.

    Returns 400 for a malformed e‑mail, a password shorter than six
    characters or an e‑mail that is already registered.
    """
    user_id = await UserService(conn).register(payload.email, payload.password)
    return RegisterResponse(userId=user_id)


@router.post("/login", response_model=LoginResponse)
async def login_user(
    payload: LoginRequest,
    conn: sqlite3.Connection = Depends(get_connection),
) -> LoginResponse:
    """Exchange e‑mail and password for a bearer token valid for 7 days.

    An unknown e‑mail and a wrong password both produce the same 401
    response.
    """
    return await UserService(conn).login(payload.email, payload.password)
