# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Active-responder rotation. Pure computation.
Picks the next active responder and derives member role tags.
"""

import random
from typing import Any, Iterable, Optional

from promptcadence.models.domain import Role


class RoleRotator:
    """Random selection of the next active responder."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def reassign(
        self,
        excluding: Optional[str],
        among: Iterable[str],
    ) -> Optional[str]:
        """
        Return a member id picked uniformly from `among` minus `excluding`,
        or None when nobody is left to pick.
        The caller persists the result.
        """
        # sorted() keeps the pick reproducible for a seeded rng
        candidates = sorted({m for m in among if m != excluding})
        if not candidates:
            return None
        return self._rng.choice(candidates)

    def initial_pick(self, among: Iterable[str]) -> Optional[str]:
        return self.reassign(None, among)


def assign_roles(
    members: list[dict[str, Any]],
    active_responder_id: Optional[str],
    admin_id: Optional[str],
) -> list[dict[str, Any]]:
    """
    Return members with their role tags recomputed.
    Exactly one member carries the active-responder tag when
    `active_responder_id` names a member.
    """
    tagged = []
    for member in members:
        if member["id"] == active_responder_id:
            role = Role.ACTIVE_RESPONDER
        elif member["id"] == admin_id:
            role = Role.ADMIN
        else:
            role = Role.MEMBER
        tagged.append({**member, "role": role.value})
    return tagged
