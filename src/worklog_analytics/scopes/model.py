from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SingleUser:
    user_id: int


@dataclass(frozen=True)
class UserSet:
    user_ids: tuple[int, ...]


@dataclass(frozen=True)
class Unscoped:
    """No user restriction (admin viewing everyone)."""


ResolvedScope = Union[SingleUser, UserSet, Unscoped]

