import enum

from sqlalchemy import Column, Enum, String, Text

from models.base_model import Base, BaseModel


class Role(str, enum.Enum):
    """Authorization tier attached to a user."""

    ADMIN = "admin"
    USER = "user"


class User(BaseModel, Base):
    __tablename__ = "users"

    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )
    # single active refresh token; overwritten on every login
    refresh_token = Column(Text, nullable=True)

    def __repr__(self):
        return f"<User username={self.username} role={getattr(self.role, 'value', self.role)}>"
