"""
SnackTrack Backend - User SQLAlchemy Model
===========================================

What:  ORM model for the `users` table.
Who:   Written by registration, read by login and by the request listing join.

Table Design:
    - Integer SERIAL primary key (existing clients store it as `userId`)
    - username: UNIQUE NOT NULL; duplicates are rejected before insert and
      by the constraint when two registrations race
    - password: bcrypt hash string, never the plaintext
    - role: free text, 'user' unless the registration body says otherwise
    - name: display name, shown as `user_name` in the all-requests listing

Rows are never updated or deleted by the API.
"""

from sqlalchemy import Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from snacktrack.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    password: Mapped[str] = mapped_column(Text, nullable=False)

    role: Mapped[str] = mapped_column(
        Text,
        nullable=True,
        default="user",
        server_default=text("'user'"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
