"""ORM model for user accounts (credentials and role)."""

from sqlalchemy import Column, Integer, String

from accounts.models.base import Base

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER)
