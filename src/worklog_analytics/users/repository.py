from __future__ import annotations

from typing import Iterable, Protocol


class UserRepository(Protocol):
    def get_display_names(self, user_ids: Iterable[int]) -> dict[int, str]:
        """Map user id to name (falling back to e-mail). Unknown ids are omitted."""

        raise NotImplementedError
