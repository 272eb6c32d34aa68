"""
SnackTrack Backend - SnackRequest SQLAlchemy Model
===================================================

What:  ORM model for the `snack_requests` table.
Who:   Used by RequestService for every /api/requests operation.

Lifecycle:
    1. Inserted by POST /api/requests (flags 0, created_at = now, ordered_at NULL)
    2. ordered_flag + ordered_at toggled together by PUT /{id}/order
    3. keep_on_hand toggled on its own by PUT /{id}/keep
    4. Physically deleted by DELETE /{id}

Invariant: ordered_at IS NOT NULL exactly when ordered_flag = 1.

Flags are INTEGER 0/1 columns (not BOOLEAN); the JSON rows carry the same
0/1 values the frontend already compares against.

Query Patterns:
    - All requests: ORDER BY CASE WHEN ordered_flag = 1 THEN ordered_at
      ELSE created_at END DESC  (see `effective_timestamp`)
    - Per user:     WHERE user_id = :id ORDER BY created_at DESC
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import TIMESTAMP, ForeignKey, Integer, Text, case, text
from sqlalchemy.orm import Mapped, mapped_column

from snacktrack.database import Base

# Largest value an INTEGER id column holds
MAX_ID = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnackRequest(Base):
    __tablename__ = "snack_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Referential integrity lives in the schema; handlers never look the user up.
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
    )

    snack: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    drink: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    misc: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    ordered_flag: Mapped[int] = mapped_column(
        Integer,
        nullable=True,
        default=0,
        server_default=text("0"),
    )

    # Set once by the service at insert time
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    ordered_at: Mapped[Optional[datetime]] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
        default=None,
    )

    keep_on_hand: Mapped[int] = mapped_column(
        Integer,
        nullable=True,
        default=0,
        server_default=text("0"),
    )

    def __repr__(self) -> str:
        return (
            f"<SnackRequest(id={self.id}, user_id={self.user_id}, "
            f"ordered_flag={self.ordered_flag}, keep_on_hand={self.keep_on_hand})>"
        )


# Single sort key for the all-requests view: when it was ordered if it was,
# otherwise when it was asked for.
effective_timestamp = case(
    (SnackRequest.ordered_flag == 1, SnackRequest.ordered_at),
    else_=SnackRequest.created_at,
)
