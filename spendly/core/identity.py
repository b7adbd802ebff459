# spendly/core/identity.py
import uuid
from dataclasses import dataclass

from spendly.models.user import User


@dataclass(frozen=True)
class CallerIdentity:
    """
    The authenticated caller, produced by the access dependency.

    Passed explicitly to every crud function; it is the only source of the
    user id used to scope queries.
    """
    user_id: uuid.UUID
    user: User
