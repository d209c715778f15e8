from sqlalchemy import Column, Integer, String

from j_user_svc.models.base import Base


class User(Base):
    """
    SQLAlchemy model representing a user account.
    Attributes:
        id (int): Unique identifier assigned by the database.
        name (str): Display name.
        email (str): User's unique email address.
        password_hash (str): bcrypt hash of the user's password. Never returned to clients.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
