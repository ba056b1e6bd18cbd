from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base


class UserModel(Base):
    """User account; the password is stored as an opaque credential."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), index=True, unique=True)
    password: Mapped[str] = mapped_column(String(255))

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
