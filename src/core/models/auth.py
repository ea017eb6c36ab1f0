"""Authenticated caller context."""

from __future__ import annotations

from dataclasses import dataclass

from core.utils.constants import PRIVILEGED_ROLE


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Identity and role resolved for a single request."""

    user_id: str
    role: str

    @property
    def is_privileged(self) -> bool:
        return self.role == PRIVILEGED_ROLE

    def can_access(self, owner_id: str) -> bool:
        return self.is_privileged or owner_id == self.user_id
