"""
Create a user with an explicit role (e.g. the first admin). Run from project root:
  python -m accounts.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m accounts.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from accounts.core.config import get_settings
from accounts.core.database import create_db_engine, create_session_factory
from accounts.core.errors import AppError
from accounts.core.logging import configure_logging
from accounts.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MIN_LEN,
    PasswordHasher,
)
from accounts.models.user import ROLE_ADMIN, ROLE_USER
from accounts.schemas.users import PASSWORD_MAX_BYTES, check_password_bytes
from accounts.services.users import create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an account with a given role.")
    parser.add_argument("name", help=f"Display name (1-{NAME_MAX_LEN} chars)")
    parser.add_argument("email", help=f"Email (1-{EMAIL_MAX_LEN} chars)")
    parser.add_argument(
        "password", help=f"Password ({PASSWORD_MIN_LEN} chars to {PASSWORD_MAX_BYTES} bytes)"
    )
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=[ROLE_USER, ROLE_ADMIN])
    args = parser.parse_args(argv)

    name = args.name.strip()
    email = args.email.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if not email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
        return 1
    try:
        check_password_bytes(args.password)
    except ValueError as e:
        print(f"{e!s}.", file=sys.stderr)
        return 1

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    db = create_session_factory(engine)()
    try:
        user = create_user(
            db,
            PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
            name,
            email,
            args.password,
            role=args.role,
        )
    except AppError as e:
        print(e.message or "Could not create user.", file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{email}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
