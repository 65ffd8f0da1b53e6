from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import TeamRole


@dataclass(frozen=True)
class Team:
    team_id: int
    name: str


@dataclass(frozen=True)
class TeamMembership:
    team_id: int
    team_name: str
    user_id: int
    role: Optional[TeamRole] = None
