"""Credential store operations: every user read/write goes through here.

Each operation is a single statement plus commit. Driver errors are mapped
into the error taxonomy: unique-constraint violations become Conflict, any
other SQLAlchemy failure becomes InternalError after a rollback.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from accounts.core.errors import Conflict, InternalError, NotFound, Unauthenticated
from accounts.core.security import PasswordHasher
from accounts.models.user import ROLE_USER, User

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation.
UNIQUE_VIOLATION_SQLSTATE = "23505"

EMAIL_TAKEN = "That email address is already registered."
LOGIN_FAILED = "Invalid email or password."
USER_NOT_FOUND = "User not found."


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "unique" in str(orig).lower()


@contextmanager
def _store_operation(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        if _is_unique_violation(e):
            raise Conflict(EMAIL_TAKEN) from e
        logger.exception("Integrity error during %s", action)
        raise InternalError(f"Integrity error during {action}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Store error during %s", action)
        raise InternalError(f"Store error during {action}") from e


def register_user(
    db: Session, hasher: PasswordHasher, name: str, email: str, password: str
) -> User:
    """Create a non-admin user. Raises Conflict if the email is taken."""
    return create_user(db, hasher, name, email, password, role=ROLE_USER)


def create_user(
    db: Session,
    hasher: PasswordHasher,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    user = User(name=name, email=email, password_hash=hasher.hash(password), role=role)
    with _store_operation(db, "user creation"):
        db.add(user)
        db.commit()
        db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate_user(db: Session, hasher: PasswordHasher, email: str, password: str) -> User:
    """
    Return the user whose email and password match.

    Unknown email and wrong password raise the same Unauthenticated message so
    the response does not reveal which accounts exist.
    """
    with _store_operation(db, "login lookup"):
        user = db.query(User).filter(User.email == email).first()
    if user is None or not hasher.verify(password, user.password_hash):
        logger.info("Login failed", extra={"email": email})
        raise Unauthenticated(LOGIN_FAILED)
    return user


def change_password(db: Session, hasher: PasswordHasher, user_id: int, new_password: str) -> None:
    """Replace the stored digest for user_id. Raises NotFound if the account is gone."""
    password_hash = hasher.hash(new_password)
    with _store_operation(db, "password change"):
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.password_hash: password_hash}, synchronize_session=False)
        )
        db.commit()
    if updated == 0:
        raise NotFound(USER_NOT_FOUND)


def list_users(db: Session) -> list[User]:
    with _store_operation(db, "user listing"):
        return db.query(User).order_by(User.id).all()


def update_user(db: Session, user_id: int, name: str, email: str, role: str) -> User:
    """Overwrite name, email and role. Raises NotFound or Conflict."""
    with _store_operation(db, "user update"):
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFound(USER_NOT_FOUND)
        user.name = name
        user.email = email
        user.role = role
        db.commit()
        db.refresh(user)
    logger.info("User updated", extra={"user_id": user.id, "role": user.role})
    return user


def delete_user(db: Session, user_id: int) -> None:
    """Delete exactly one user. Raises NotFound when no row matches."""
    with _store_operation(db, "user deletion"):
        deleted = (
            db.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    if deleted == 0:
        raise NotFound(USER_NOT_FOUND)
    logger.info("User deleted", extra={"user_id": user_id})
