"""
Tests for admin user management.
"""
import pytest

from devnovate import accounts
from devnovate.exceptions import InvalidState, NotFound, Unauthorized, ValidationFailed
from devnovate.permissions import can_manage, is_admin, user_role


class TestRoles:
    def test_roles(self, author, moderator, admin_user):
        assert user_role(author) == "user"
        assert user_role(moderator) == "admin"
        assert is_admin(admin_user)

    def test_can_manage(self, author, reader, moderator):
        assert can_manage(author, author.pk)
        assert can_manage(moderator, author.pk)
        assert not can_manage(reader, author.pk)

    def test_inactive_cannot_manage(self, author, moderator):
        moderator.is_active = False
        assert not can_manage(moderator, author.pk)


class TestToggleStatus:
    def test_deactivate_and_reactivate(self, moderator, reader):
        accounts.toggle_user_status(moderator, reader)
        reader.refresh_from_db()
        assert not reader.is_active

        accounts.toggle_user_status(moderator, reader)
        reader.refresh_from_db()
        assert reader.is_active

    def test_cannot_deactivate_self(self, moderator):
        with pytest.raises(InvalidState):
            accounts.toggle_user_status(moderator, moderator)

    def test_requires_admin(self, author, reader):
        with pytest.raises(Unauthorized):
            accounts.toggle_user_status(author, reader)


class TestChangeRole:
    def test_promote_and_demote(self, moderator, reader):
        accounts.change_user_role(moderator, reader, "admin")
        reader.refresh_from_db()
        assert is_admin(reader)

        accounts.change_user_role(moderator, reader, "user")
        reader.refresh_from_db()
        assert not is_admin(reader)

    def test_demote_superuser(self, moderator, admin_user):
        accounts.change_user_role(moderator, admin_user, "user")
        admin_user.refresh_from_db()
        assert not admin_user.is_superuser
        assert user_role(admin_user) == "user"

    def test_unknown_role(self, moderator, reader):
        with pytest.raises(ValidationFailed):
            accounts.change_user_role(moderator, reader, "editor")

    def test_cannot_change_own_role(self, moderator):
        with pytest.raises(InvalidState):
            accounts.change_user_role(moderator, moderator, "user")


class TestListUsers:
    def test_search(self, author, reader, moderator):
        page = accounts.list_users(search="READ")
        assert [user.pk for user in page.items] == [reader.pk]

    def test_filter_by_role(self, author, reader, moderator):
        admins = accounts.list_users(role="admin")
        users = accounts.list_users(role="user")
        assert [user.pk for user in admins.items] == [moderator.pk]
        assert {user.pk for user in users.items} == {author.pk, reader.pk}

    def test_pagination(self, author, reader, moderator):
        page = accounts.list_users(page=2, limit=2)
        assert len(page.items) == 1
        assert page.pagination.total == 3
        assert page.pagination.has_prev

    def test_get_user(self, reader):
        assert accounts.get_user(reader.pk) == reader
        with pytest.raises(NotFound):
            accounts.get_user(reader.pk + 100)
