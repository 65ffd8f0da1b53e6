from __future__ import annotations

import logging
from typing import Optional, Union

from ..auth.identity import Identity
from ..core.enums import Purpose, Scope
from ..core.exceptions import AuthorizationError, ValidationError
from ..teams.service import TeamMembershipService
from .model import ResolvedScope, SingleUser, Unscoped, UserSet
from .policy import Capability, Relationship, can

logger = logging.getLogger(__name__)

_FORBIDDEN_ALL = {
    Purpose.VIEW: "Only admins can view all work logs",
    Purpose.EXPORT: "Forbidden: Only admins can export all users' work logs",
}


def parse_scope(value: Union[Scope, str, None]) -> Scope:
    if value is None or value == "":
        return Scope.OWN
    try:
        return Scope(value)
    except ValueError:
        raise ValidationError(f"Unknown scope: {value!r}", field="scope")


class ScopeResolver:
    """Turns (identity, requested scope, optional target) into a concrete user filter."""

    def __init__(self, memberships: TeamMembershipService):
        self._memberships = memberships

    def resolve(
        self,
        identity: Identity,
        requested_scope: Union[Scope, str, None] = Scope.OWN,
        target_user_id: Optional[int] = None,
        *,
        purpose: Purpose = Purpose.VIEW,
    ) -> ResolvedScope:
        scope = parse_scope(requested_scope)

        if scope == Scope.ALL:
            needed = Capability.EXPORT_ALL if purpose == Purpose.EXPORT else Capability.VIEW_ALL
            if not can(identity.role, Relationship.NONE, needed):
                logger.warning("user %s denied scope=all (%s)", identity.user_id, purpose.value)
                raise AuthorizationError(_FORBIDDEN_ALL[purpose], reason="role")
            if target_user_id is not None:
                return SingleUser(int(target_user_id))
            return Unscoped()

        if scope == Scope.TEAM:
            ids = self._memberships.teammate_ids(identity.user_id)
            if not ids:
                logger.debug("user %s has no team, falling back to own scope", identity.user_id)
                return SingleUser(identity.user_id)
            return UserSet(tuple(ids))

        return SingleUser(identity.user_id)
