from sqlalchemy import Column, ForeignKey, Index, Text

from storefront.db import Base, BigIntPK, UTCDateTime, utcnow


USER_ROLES = ("admin", "customer")


class User(Base):
    """
    A registered account, either a customer or a store admin.

    email is stored lower-cased; every lookup lower-cases its input first, so
    the unique index doubles as a case-insensitive uniqueness check.

    password_hash is a bcrypt hash and must never leave the service. Response
    shapes are built from UserOut, which does not declare the column.
    """

    __tablename__ = "users"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="customer")
    password_hash = Column(Text, nullable=False)
    image = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (Index("ix_users_role", "role"),)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"


class UserSession(Base):
    """
    An opaque session token issued at register/login.

    The token is a random UUID string looked up by equality; it carries no
    claims. ON DELETE CASCADE drops a user's sessions along with the user.
    """

    __tablename__ = "sessions"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token = Column(Text, nullable=False, unique=True)
    expires_at = Column(UTCDateTime, nullable=False)
    user_agent = Column(Text, nullable=True)
    ip = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_sessions_user", "user_id"),
        Index("ix_sessions_expires", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<UserSession id={self.id} user_id={self.user_id}>"
