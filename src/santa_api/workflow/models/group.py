"""
Group and Membership Models

Database models for exchange groups and the participants who belong to them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Group(BaseModel):
    """Group database model."""

    group_id: str
    name: str
    owner_id: str
    join_code: str  # unique, 6 hex chars
    created_at: datetime

    class Config:
        from_attributes = True
        extra = "forbid"


class Membership(BaseModel):
    """Membership database model. Unique per (group_id, user_id)."""

    group_id: str
    user_id: str
    email: Optional[str] = None  # santa notification address, from identity claims
    display_name: Optional[str] = None
    joined_at: datetime

    class Config:
        from_attributes = True
        extra = "forbid"
