"""
Authentication endpoint for API v1.

The returned token must be sent as ``Authorization: Bearer <token>``
with every other request.
"""

from fastapi import APIRouter

from habit_ledger.app.schemas.auth import LoginRequest, Token
from habit_ledger.app.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest) -> Token:
    """Exchange the owner's username and password for an access token."""
    token = await AuthService.login(credentials.username, credentials.password)
    return Token(access_token=token)
