"""Pydantic models for server payloads consumed by the client."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    """Request body for register and login."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Response body of a successful login."""
    token: str
    private_key: str


class ErrorBody(BaseModel):
    """Structured error returned by the servers."""
    error: str


class ShareLink(BaseModel):
    """One share link as listed by the server."""
    model_config = ConfigDict(extra='allow')

    id: str
    file_name: str
    username: Optional[str] = None


class AddLinkRequest(BaseModel):
    """Request body for creating a share link."""
    file_name: str
