"""
Pydantic schemas for owner login.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., examples=["admin"])
    password: str = Field(..., examples=["admin123"])


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
