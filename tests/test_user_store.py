"""Unit tests for accounts.services.users: store-error mapping with mocked sessions."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError

from accounts.core.errors import Conflict, InternalError, NotFound, Unauthenticated
from accounts.services.users import (
    EMAIL_TAKEN,
    LOGIN_FAILED,
    authenticate_user,
    change_password,
    delete_user,
    list_users,
    register_user,
    update_user,
)


class _PgUniqueViolation(Exception):
    pgcode = "23505"


class _PgNotNullViolation(Exception):
    pgcode = "23502"


def _hasher(verifies: bool = True) -> MagicMock:
    hasher = MagicMock()
    hasher.hash.return_value = "$2b$10$digest"
    hasher.verify.return_value = verifies
    return hasher


class TestRegisterErrorMapping(unittest.TestCase):
    """Unique violations become Conflict; every other store failure becomes InternalError."""

    def test_postgres_unique_violation_is_conflict(self) -> None:
        session = MagicMock()
        session.commit.side_effect = IntegrityError("INSERT", {}, _PgUniqueViolation("dup"))
        with self.assertRaises(Conflict) as ctx:
            register_user(session, _hasher(), "Ada", "ada@example.com", "password123")
        self.assertEqual(ctx.exception.message, EMAIL_TAKEN)
        session.rollback.assert_called_once()

    def test_sqlite_unique_violation_is_conflict(self) -> None:
        session = MagicMock()
        session.commit.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: users.email")
        )
        with self.assertRaises(Conflict):
            register_user(session, _hasher(), "Ada", "ada@example.com", "password123")

    def test_other_integrity_error_is_internal(self) -> None:
        session = MagicMock()
        session.commit.side_effect = IntegrityError("INSERT", {}, _PgNotNullViolation("null"))
        with self.assertRaises(InternalError):
            register_user(session, _hasher(), "Ada", "ada@example.com", "password123")
        session.rollback.assert_called_once()

    def test_operational_error_is_internal(self) -> None:
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("down"))
        with self.assertRaises(InternalError):
            register_user(session, _hasher(), "Ada", "ada@example.com", "password123")

    def test_registered_user_is_non_admin_with_hashed_password(self) -> None:
        session = MagicMock()
        user = register_user(session, _hasher(), "Ada", "ada@example.com", "password123")
        self.assertEqual(user.role, "user")
        self.assertEqual(user.password_hash, "$2b$10$digest")
        session.add.assert_called_once_with(user)
        session.commit.assert_called_once()


class TestAuthenticate(unittest.TestCase):
    """Unknown email and wrong password are indistinguishable to the caller."""

    def test_unknown_email(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = None
        hasher = _hasher()
        with self.assertRaises(Unauthenticated) as ctx:
            authenticate_user(session, hasher, "nobody@example.com", "password123")
        self.assertEqual(ctx.exception.message, LOGIN_FAILED)
        hasher.verify.assert_not_called()

    def test_wrong_password(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = MagicMock(
            password_hash="$2b$10$digest"
        )
        with self.assertRaises(Unauthenticated) as ctx:
            authenticate_user(session, _hasher(verifies=False), "ada@example.com", "wrong-pass")
        self.assertEqual(ctx.exception.message, LOGIN_FAILED)

    def test_lookup_failure_is_internal(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with self.assertRaises(InternalError):
            authenticate_user(session, _hasher(), "ada@example.com", "password123")


class TestMutations(unittest.TestCase):
    def test_change_password_for_missing_user_is_not_found(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.update.return_value = 0
        with self.assertRaises(NotFound):
            change_password(session, _hasher(), 99, "new-password")

    def test_change_password_writes_new_digest(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.update.return_value = 1
        change_password(session, _hasher(), 1, "new-password")
        session.commit.assert_called_once()

    def test_delete_missing_user_is_not_found(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 0
        with self.assertRaises(NotFound):
            delete_user(session, 99)

    def test_delete_existing_user(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 1
        delete_user(session, 1)
        session.commit.assert_called_once()

    def test_update_missing_user_is_not_found(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = None
        with self.assertRaises(NotFound):
            update_user(session, 99, "Ada", "ada@example.com", "user")
        session.commit.assert_not_called()

    def test_update_to_taken_email_is_conflict(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = MagicMock()
        session.commit.side_effect = IntegrityError("UPDATE", {}, _PgUniqueViolation("dup"))
        with self.assertRaises(Conflict):
            update_user(session, 1, "Ada", "taken@example.com", "user")

    def test_list_failure_is_internal(self) -> None:
        session = MagicMock()
        session.query.return_value.order_by.return_value.all.side_effect = OperationalError(
            "SELECT", {}, Exception("down")
        )
        with self.assertRaises(InternalError):
            list_users(session)


if __name__ == "__main__":
    unittest.main()
