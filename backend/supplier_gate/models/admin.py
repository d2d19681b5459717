"""Administrator membership and user records used for admin authorization."""

from sqlalchemy import Column, String, Boolean

from supplier_gate.db_base import Base


class Admin(Base):
    """Membership row: the presence of a row grants administrator access."""
    __tablename__ = "admins"

    uid = Column(String(255), primary_key=True)

    def __repr__(self) -> str:
        return f"<Admin(uid={self.uid})>"


class User(Base):
    """
    User record.

    Only the isAdmin flag is consulted here. NULL is treated as not admin.
    """
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    is_admin = Column(Boolean, nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, is_admin={self.is_admin})>"
