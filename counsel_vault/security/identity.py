"""Caller identity supplied by the session layer. Roles mirror the platform's user roles."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(Enum):
    ADMIN = "ADMIN"
    COUNSELOR = "COUNSELOR"
    HOMEROOM_TEACHER = "HOMEROOM_TEACHER"
    STUDENT = "STUDENT"


@dataclass(frozen=True)
class Caller:
    """
    Already-authenticated caller as resolved by the identity collaborator.
    actor_id is None for anonymous requests. ip_address / user_agent are carried
    into audit entries when the host knows them.
    """

    actor_id: Optional[str]
    role: Optional[Role]
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.actor_id) and self.role is not None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls(actor_id=None, role=None)
