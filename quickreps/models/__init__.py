"""ORM models - import all so Base.metadata is complete for migrations."""

from quickreps.models.exercise import Exercise
from quickreps.models.profile import AccessToken, Profile
from quickreps.models.set_record import SetRecord

__all__ = [
    "AccessToken",
    "Exercise",
    "Profile",
    "SetRecord",
]
