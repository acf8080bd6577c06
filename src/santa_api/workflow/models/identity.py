"""
Identity Model

The authenticated caller, as asserted by the external identity provider.
"""

from typing import Optional

from pydantic import BaseModel

from santa_api.workflow.enums import Role


class Identity(BaseModel):
    """Caller identity decoded from signed claims."""

    user_id: str
    role: Role
    email: Optional[str] = None
    name: Optional[str] = None

    class Config:
        extra = "forbid"
        frozen = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
