"""Single place where role / relationship rules turn into capabilities."""

from __future__ import annotations

from enum import Enum

from ..core.enums import Role


class Relationship(str, Enum):
    """How the caller relates to the data owner (or team) being accessed."""

    SELF = "self"
    TEAM_LEADER = "team_leader"
    TEAM_MEMBER = "team_member"
    TEAM_VIEWER = "team_viewer"
    NONE = "none"


class Capability(str, Enum):
    VIEW_OWN = "view_own"
    VIEW_TEAM = "view_team"
    VIEW_ALL = "view_all"
    VIEW_ANY_TEAM = "view_any_team"
    EXPORT_OWN = "export_own"
    EXPORT_TEAM = "export_team"
    EXPORT_ALL = "export_all"
    EXPORT_USER = "export_user"


_ADMIN = frozenset(Capability)

_BY_RELATIONSHIP = {
    Relationship.SELF: frozenset(
        {Capability.VIEW_OWN, Capability.VIEW_TEAM, Capability.EXPORT_OWN, Capability.EXPORT_TEAM}
    ),
    Relationship.TEAM_LEADER: frozenset({Capability.VIEW_TEAM, Capability.EXPORT_TEAM}),
    Relationship.TEAM_MEMBER: frozenset({Capability.VIEW_TEAM, Capability.EXPORT_TEAM}),
    Relationship.TEAM_VIEWER: frozenset({Capability.VIEW_TEAM}),
    Relationship.NONE: frozenset(),
}


def capabilities_for(role: Role, relationship: Relationship) -> frozenset[Capability]:
    """Capabilities a caller with ``role`` has over a target reached through ``relationship``.

    Admins hold every capability regardless of the relationship. Other roles
    (manager included) only get what the relationship grants.
    """

    if role == Role.ADMIN:
        return _ADMIN
    return _BY_RELATIONSHIP[relationship]


def can(role: Role, relationship: Relationship, capability: Capability) -> bool:
    return capability in capabilities_for(role, relationship)
