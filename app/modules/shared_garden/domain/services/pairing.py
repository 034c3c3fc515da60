# 📄 File: app/modules/shared_garden/domain/services/pairing.py
# 🧭 Purpose (Layman Explanation):
# Turns "me and my partner" into the one name of our shared garden, so that whichever
# of us opens the app, we both land in the same garden.
# 🧪 Purpose (Technical Summary):
# Deterministic couple key derivation: the two user IDs sorted lexicographically and
# joined with an underscore. Symmetric by construction.
# 🔗 Dependencies:
# app.shared.core.exceptions (ValidationError)
# 🔄 Connected Modules / Calls From:
# Shared garden engine (every command), presentation dependencies, dev tools

from dataclasses import dataclass
from typing import Optional

from app.shared.core.exceptions import ValidationError

COUPLE_KEY_SEPARATOR = "_"


@dataclass(frozen=True)
class CoupleKey:
    """Resolved identity of a shared garden."""

    value: str
    user1_id: str
    user2_id: str

    def partner_of(self, user_id: str) -> str:
        if user_id == self.user1_id:
            return self.user2_id
        if user_id == self.user2_id:
            return self.user1_id
        raise ValidationError(
            "User is not a member of this garden",
            field="user_id",
            value=user_id,
        )

    def __str__(self) -> str:
        return self.value


def resolve_couple_key(user_id: Optional[str], partner_id: Optional[str]) -> CoupleKey:
    """
    Derive the couple key for a pair of users.

    resolve_couple_key(a, b) == resolve_couple_key(b, a) for all a, b.

    Raises:
        ValidationError: when either ID is missing or both are the same user
    """
    if not user_id:
        raise ValidationError("User ID is required", field="user_id")
    if not partner_id:
        raise ValidationError("Partner ID is required", field="partner_id")
    if user_id == partner_id:
        raise ValidationError(
            "A garden needs two different partners",
            field="partner_id",
            value=partner_id,
        )

    first, second = sorted([user_id, partner_id])
    return CoupleKey(
        value=f"{first}{COUPLE_KEY_SEPARATOR}{second}",
        user1_id=first,
        user2_id=second,
    )
