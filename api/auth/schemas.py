"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1, max_length=128)


class AdminResponse(BaseModel):
    id: int
    username: str
    role: str


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: AdminResponse


class Principal(BaseModel):
    identity: int
    role: str
