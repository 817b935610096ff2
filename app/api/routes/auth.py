"""
Login route.

Signs the user in against the auth service and stores the access token in
an httponly ``token`` cookie, plus a script-readable ``is-logged`` flag.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from app.core.auth import TOKEN_COOKIE, get_auth_client
from app.core.config import settings
from app.services.auth_client import AuthenticationError, SupabaseAuthClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


@router.post("/login")
async def login(
    payload: LoginRequest,
    response: Response,
    auth_client: SupabaseAuthClient = Depends(get_auth_client)
):
    try:
        session = await auth_client.sign_in(payload.email, payload.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))

    response.set_cookie(
        TOKEN_COOKIE,
        session.access_token,
        max_age=settings.TOKEN_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    response.set_cookie(
        "is-logged",
        "true",
        max_age=settings.TOKEN_COOKIE_MAX_AGE,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    logger.info(f"User {session.user.get('id', 'unknown')} signed in")
    return {"message": "Login successfully", "user": session.user}
