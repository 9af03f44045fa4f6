"""Token types and claim models for bearer tokens."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TokenType(str, Enum):
    """Kinds of signed bearer tokens issued by Inkpost."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """Identity claims carried by access and refresh tokens."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: str = Field(..., description="Unique identifier of the user")
    email: str = Field(..., description="User's email address")
    role: str = Field(..., description="User's role (USER or ADMIN)")
