"""Domain tests for checkout users."""

import pytest
from ordering.users.user import Role, User, find_user_by_email
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


class TestUser:
    def test_default_role_is_user(self):
        user = User(name="Mona", email="mona@example.com")
        assert user.role == Role.USER.value

    def test_find_by_email(self):
        user = User(name="Mona", email="mona@example.com", role=Role.SELLER.value)
        current_domain.repository_for(User).add(user)

        found = find_user_by_email("mona@example.com")
        assert found.id == user.id
        assert found.role == Role.SELLER.value

    def test_find_by_unknown_email(self):
        with pytest.raises(ObjectNotFoundError):
            find_user_by_email("nobody@example.com")

    def test_find_by_empty_email(self):
        with pytest.raises(ObjectNotFoundError):
            find_user_by_email(None)
