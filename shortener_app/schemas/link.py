from typing import Optional

from pydantic import BaseModel, Field


class LinkCreate(BaseModel):
    link: str = Field(..., min_length=1, description="The original URL to be shortened")
    name: Optional[str] = Field(
        None,
        pattern=r"^[a-zA-Z0-9]*$",
        max_length=64,
        description="Requested short name; generated when omitted or empty",
    )


class LinkCreated(BaseModel):
    short_link: str


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Identity the token is issued for")


class TokenResponse(BaseModel):
    token: str


class DeleteUserRequest(BaseModel):
    email: str = Field(..., min_length=1)
