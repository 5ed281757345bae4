"""Users known to checkout, read by the payer lookup and the role guards."""

from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from ordering.domain import ordering


class Role(Enum):
    USER = "user"
    ADMIN = "admin"
    SELLER = "seller"


@ordering.aggregate
class User:
    name = String(max_length=100)
    email = String(required=True, max_length=254, unique=True)
    role = String(choices=Role, default=Role.USER.value)


def find_user_by_email(email: str) -> User:
    """Return the user registered with ``email``.

    Raises ObjectNotFoundError when no such user exists.
    """
    if email:
        users = current_domain.repository_for(User)._dao.query.filter(email=email).all().items
        if users:
            return users[0]
    raise ObjectNotFoundError({"email": [f"No user registered with email {email}"]})
