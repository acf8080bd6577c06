"""
Mapping and Acknowledgement Models

Santa -> recipient assignments produced by a shuffle, and the santa's
confirmation that a gift was sent.
"""

from datetime import datetime

from pydantic import BaseModel


class Mapping(BaseModel):
    """Mapping database model. Unique per (group_id, event_id, santa_id)."""

    group_id: str
    event_id: str = "default"
    santa_id: str
    recipient_id: str

    class Config:
        from_attributes = True
        extra = "forbid"


class Acknowledgement(BaseModel):
    """Acknowledgement database model. Unique per (group_id, santa_id, recipient_id)."""

    group_id: str
    santa_id: str
    recipient_id: str
    sent: bool = True
    sent_at: datetime

    class Config:
        from_attributes = True
        extra = "forbid"
