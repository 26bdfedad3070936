"""Per-request identity passed explicitly to the write paths."""

from __future__ import annotations

from dataclasses import dataclass

from silica_social.models import User


@dataclass(frozen=True)
class SessionContext:
    """Authenticated caller resolved by the session gate."""

    user_id: int
    moniker: str
    public_key: str

    @classmethod
    def from_user(cls, user: User) -> SessionContext:
        return cls(user_id=user.id, moniker=user.moniker, public_key=user.public_key)
