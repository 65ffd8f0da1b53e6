from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..auth.identity import Identity
from ..core.enums import TeamRole
from ..core.exceptions import AuthorizationError, NotFoundError
from ..scopes.policy import Capability, Relationship, can
from .repository import TeamRepository

logger = logging.getLogger(__name__)

_TEAM_RELATIONSHIP = {
    TeamRole.LEADER: Relationship.TEAM_LEADER,
    TeamRole.MEMBER: Relationship.TEAM_MEMBER,
    TeamRole.VIEWER: Relationship.TEAM_VIEWER,
}


@dataclass(frozen=True)
class TeamSelection:
    team_id: int
    team_name: str
    member_ids: tuple[int, ...]

    @property
    def member_count(self) -> int:
        return len(self.member_ids)


class TeamMembershipService:
    def __init__(self, teams: TeamRepository):
        self._teams = teams

    def teammate_ids(self, user_id: int) -> list[int]:
        """Depth-1 membership closure: the user plus every member of the user's teams.

        Returns an empty list when the user belongs to no team. Order is the user
        first, then teammates in store order, without duplicates.
        """

        team_ids = [m.team_id for m in self._teams.get_memberships_for_user(user_id)]
        if not team_ids:
            return []
        members = self._teams.get_member_ids(team_ids)
        return list(dict.fromkeys([int(user_id), *(int(m) for m in members)]))

    def resolve_team(self, identity: Identity, team_id: Optional[int] = None) -> TeamSelection:
        """Pick the team a team-stats request is about and load its members."""

        memberships = self._teams.get_memberships_for_user(identity.user_id)

        if team_id is not None:
            own = next((m for m in memberships if m.team_id == int(team_id)), None)
            if own is None:
                relationship = Relationship.NONE
            else:
                relationship = _TEAM_RELATIONSHIP.get(own.role, Relationship.TEAM_MEMBER)

            if not can(identity.role, relationship, Capability.VIEW_ANY_TEAM) and not can(
                identity.role, relationship, Capability.VIEW_TEAM
            ):
                raise AuthorizationError("You are not a member of this team", reason="owner")

            if own is not None:
                selected_id, selected_name = own.team_id, own.team_name
            else:
                team = self._teams.get_by_id(int(team_id))
                if team is None:
                    raise NotFoundError("Team not found")
                selected_id, selected_name = team.team_id, team.name
        else:
            if not memberships:
                raise NotFoundError("You are not a member of any team")
            selected_id, selected_name = memberships[0].team_id, memberships[0].team_name

        member_ids = tuple(dict.fromkeys(int(m) for m in self._teams.get_member_ids([selected_id])))
        if not member_ids:
            raise NotFoundError("No members found in this team")

        logger.debug("team %s selected with %d members", selected_id, len(member_ids))
        return TeamSelection(team_id=selected_id, team_name=selected_name, member_ids=member_ids)
