"""Exclusive-owner access decision for confidential records. No role overrides ownership."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

from counsel_vault.security.identity import Caller, Role


class DenialReason(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    WRONG_ROLE = "WRONG_ROLE"
    NOT_OWNER = "NOT_OWNER"


@dataclass(frozen=True)
class Allowed:
    pass


@dataclass(frozen=True)
class Denied:
    reason: DenialReason


Decision = Union[Allowed, Denied]


class OwnedResource(Protocol):
    owner_id: str


class AccessControlGuard:
    """
    Rules, in order:
      1. caller must be authenticated
      2. caller's role must be exactly COUNSELOR (ADMIN included in the denial)
      3. caller's actor_id must equal the resource's owner_id
    Callers must audit every Denied before surfacing an error.
    """

    def check_role(self, caller: Caller) -> Decision:
        """Rules 1 and 2 only. Used where there is no single record yet (listing)."""
        if not caller.is_authenticated:
            return Denied(DenialReason.UNAUTHENTICATED)
        if caller.role is not Role.COUNSELOR:
            return Denied(DenialReason.WRONG_ROLE)
        return Allowed()

    def authorize(self, caller: Caller, resource: OwnedResource) -> Decision:
        decision = self.check_role(caller)
        if isinstance(decision, Denied):
            return decision
        if caller.actor_id != resource.owner_id:
            return Denied(DenialReason.NOT_OWNER)
        return Allowed()
