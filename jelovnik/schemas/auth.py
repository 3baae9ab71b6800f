from __future__ import annotations

from pydantic import BaseModel


class TokenResponse(BaseModel):
    """POST /api/v1/auth/token (form: username=email, password=...)."""

    access_token: str
    token_type: str = "bearer"
