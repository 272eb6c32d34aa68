"""
SnackTrack Backend - Snack Request Service
===========================================

What:  Every operation on `snack_requests`: list (all / per user), submit,
       mark ordered, mark keep-on-hand, delete.
Who:   Called by the /api/requests route handlers.

Each method issues exactly one statement on the session it is given and
commits its own write. Datastore failures are logged with detail and
re-raised as DatabaseError carrying only the operation's public message.
Updates and deletes that match no row raise NotFoundError.

No method holds state between calls; concurrent toggles and deletes on the
same row are serialized only by the datastore itself.
"""

import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snacktrack.exceptions import DatabaseError, NotFoundError
from snacktrack.models.snack_request import SnackRequest, effective_timestamp, utcnow
from snacktrack.models.user import User
from snacktrack.schemas.common import MessageResponse
from snacktrack.schemas.snack_request import (
    SnackRequestCreate,
    SnackRequestResponse,
    SnackRequestWithUserResponse,
)

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch snack requests"
CREATE_FAILED = "Failed to create snack request"
UPDATE_FAILED = "Failed to update snack request"
DELETE_FAILED = "Failed to delete snack request"

UPDATED = "Snack request updated successfully"
DELETED = "Snack request deleted successfully"


class RequestService:
    """
    Business logic for snack requests.

    Error Handling Strategy:
        SQLAlchemyError / OSError (driver, pool, network) → DatabaseError
        rowcount == 0 on update/delete                    → NotFoundError
    """

    async def list_all(self, db: AsyncSession) -> List[SnackRequestWithUserResponse]:
        """
        All requests with the requester's name, most recent activity first.

        Query:
            SELECT snack_requests.*, users.name AS user_name
            FROM snack_requests JOIN users ON snack_requests.user_id = users.id
            ORDER BY CASE WHEN ordered_flag = 1 THEN ordered_at
                          ELSE created_at END DESC

        Ordered items sort by when they were ordered, open items by when they
        were created, interleaved on that one key.
        """
        query = (
            select(*SnackRequest.__table__.c, User.name.label("user_name"))
            .join(User, SnackRequest.user_id == User.id)
            .order_by(effective_timestamp.desc())
        )
        try:
            result = await db.execute(query)
            rows = result.mappings().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error fetching requests: %s", e, exc_info=True)
            raise DatabaseError(message=FETCH_FAILED, context={"error_type": type(e).__name__})

        return [SnackRequestWithUserResponse.model_validate(dict(row)) for row in rows]

    async def list_for_user(self, db: AsyncSession, user_id: int) -> List[SnackRequestResponse]:
        """A single user's requests, newest first by creation time only."""
        query = (
            select(SnackRequest)
            .where(SnackRequest.user_id == user_id)
            .order_by(SnackRequest.created_at.desc())
        )
        try:
            result = await db.execute(query)
            requests = list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error fetching requests for user %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message=FETCH_FAILED,
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

        return [SnackRequestResponse.model_validate(r) for r in requests]

    async def create(self, db: AsyncSession, payload: SnackRequestCreate) -> SnackRequestResponse:
        """
        Insert one request and return the row as persisted.

        `created_at` is stamped here; flags start at 0 and `ordered_at` at NULL.
        """
        snack_request = SnackRequest(
            user_id=payload.user_id,
            snack=payload.snack,
            drink=payload.drink,
            misc=payload.misc,
            link=payload.link,
            ordered_flag=0,
            created_at=utcnow(),
            ordered_at=None,
            keep_on_hand=0,
        )
        try:
            db.add(snack_request)
            await db.flush()  # assigns snack_request.id
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            await db.rollback()
            logger.error("Error creating request for user %s: %s", payload.user_id, e, exc_info=True)
            raise DatabaseError(
                message=CREATE_FAILED,
                context={"user_id": payload.user_id, "error_type": type(e).__name__},
            )

        logger.info("Snack request %s created for user %s", snack_request.id, payload.user_id)
        return SnackRequestResponse.model_validate(snack_request)

    async def set_ordered(self, db: AsyncSession, request_id: int, ordered: bool) -> MessageResponse:
        """
        Mark a request ordered (flag 1, ordered_at = now) or un-ordered
        (flag 0, ordered_at = NULL). Both columns change in one UPDATE.
        """
        statement = (
            update(SnackRequest)
            .where(SnackRequest.id == request_id)
            .values(
                ordered_flag=1 if ordered else 0,
                ordered_at=utcnow() if ordered else None,
            )
        )
        await self._update_one(db, statement, request_id, "ordered_flag")
        return MessageResponse(message=UPDATED)

    async def set_keep_on_hand(
        self, db: AsyncSession, request_id: int, keep_on_hand: bool
    ) -> MessageResponse:
        """Set the keep-on-hand flag; ordered_flag and ordered_at are untouched."""
        statement = (
            update(SnackRequest)
            .where(SnackRequest.id == request_id)
            .values(keep_on_hand=1 if keep_on_hand else 0)
        )
        await self._update_one(db, statement, request_id, "keep_on_hand")
        return MessageResponse(message=UPDATED)

    async def delete(self, db: AsyncSession, request_id: int) -> MessageResponse:
        """Permanently remove a request."""
        statement = delete(SnackRequest).where(SnackRequest.id == request_id)
        try:
            result = await db.execute(statement)
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            await db.rollback()
            logger.error("Error deleting request %s: %s", request_id, e, exc_info=True)
            raise DatabaseError(
                message=DELETE_FAILED,
                context={"request_id": request_id, "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="Snack request", resource_id=request_id)

        logger.info("Snack request %s deleted", request_id)
        return MessageResponse(message=DELETED)

    async def _update_one(self, db: AsyncSession, statement, request_id: int, column: str) -> None:
        try:
            result = await db.execute(statement)
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            await db.rollback()
            logger.error("Error updating %s on request %s: %s", column, request_id, e, exc_info=True)
            raise DatabaseError(
                message=UPDATE_FAILED,
                context={"request_id": request_id, "column": column, "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="Snack request", resource_id=request_id)

        logger.info("Snack request %s: %s updated", request_id, column)


request_service = RequestService()
