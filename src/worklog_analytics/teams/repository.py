from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Team, TeamMembership


class TeamRepository(Protocol):
    def get_memberships_for_user(self, user_id: int) -> Sequence[TeamMembership]:
        """Teams the user belongs to, oldest membership first."""

        raise NotImplementedError

    def get_member_ids(self, team_ids: Iterable[int]) -> Sequence[int]:
        raise NotImplementedError

    def get_by_id(self, team_id: int) -> Optional[Team]:
        raise NotImplementedError
