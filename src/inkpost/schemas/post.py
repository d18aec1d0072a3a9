"""Pydantic schemas for posts."""

from datetime import datetime

from pydantic import BaseModel


class PostWrite(BaseModel):
    """Body for both create and update; both fields must be non-blank."""
    title: str = ""
    body: str = ""


class PostRead(BaseModel):
    id: int
    title: str
    body: str
    owner_id: int
    author: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
