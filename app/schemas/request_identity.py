from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class ActorRole(str, enum.Enum):
    SHIPPER = "shipper"
    FORWARDER = "forwarder"
    ADMIN = "admin"


class RequestIdentity(BaseModel):
    actor_id: int
    role: ActorRole
    auth_source: str = "anonymous"
    claims: dict = Field(default_factory=dict)

    @property
    def audit_tag(self) -> str:
        return f"{self.role.value}:{self.actor_id}"
