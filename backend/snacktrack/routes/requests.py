"""
SnackTrack Backend - Snack Request Routes
==========================================

What:  The /api/requests resource.

Route Inventory:
    GET    /api/requests                  all requests + requester name
    GET    /api/requests/user/{userId}    one user's requests
    POST   /api/requests                  submit a request
    PUT    /api/requests/{id}/order       mark ordered / un-ordered
    PUT    /api/requests/{id}/keep        mark keep-on-hand
    DELETE /api/requests/{id}             delete a request

The admin-only actions (order, keep, delete) are not access controlled.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from snacktrack.database import get_db_session
from snacktrack.models.snack_request import MAX_ID
from snacktrack.schemas.common import ErrorResponse, MessageResponse
from snacktrack.schemas.snack_request import (
    KeepOnHandUpdate,
    OrderedUpdate,
    SnackRequestCreate,
    SnackRequestResponse,
    SnackRequestWithUserResponse,
)
from snacktrack.services.request_service import request_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/requests", tags=["Snack Requests"])

_server_error = {"description": "Server error", "model": ErrorResponse}
_bad_request = {"description": "Malformed body or path parameter", "model": ErrorResponse}
_not_found = {"description": "No request with this id", "model": ErrorResponse}


@router.get(
    "",
    response_model=List[SnackRequestWithUserResponse],
    responses={500: _server_error},
    summary="List all snack requests",
    description=(
        "Every request joined with the requester's name as `user_name`, sorted "
        "newest first by `ordered_at` for ordered items and `created_at` otherwise."
    ),
)
async def list_requests(
    db: AsyncSession = Depends(get_db_session),
) -> List[SnackRequestWithUserResponse]:
    return await request_service.list_all(db)


@router.get(
    "/user/{userId}",
    response_model=List[SnackRequestResponse],
    responses={400: _bad_request, 500: _server_error},
    summary="List one user's snack requests",
)
async def list_user_requests(
    user_id: int = Path(alias="userId", ge=1, le=MAX_ID, description="Id of the requesting user"),
    db: AsyncSession = Depends(get_db_session),
) -> List[SnackRequestResponse]:
    return await request_service.list_for_user(db, user_id)


@router.post(
    "",
    status_code=201,
    response_model=SnackRequestResponse,
    responses={400: _bad_request, 500: _server_error},
    summary="Submit a snack request",
)
async def create_request(
    payload: SnackRequestCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SnackRequestResponse:
    logger.info("Received snack request from user %s", payload.user_id)
    return await request_service.create(db, payload)


@router.put(
    "/{id}/order",
    response_model=MessageResponse,
    responses={400: _bad_request, 404: _not_found, 500: _server_error},
    summary="Mark a request ordered or un-ordered",
)
async def update_ordered(
    payload: OrderedUpdate,
    request_id: int = Path(alias="id", ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await request_service.set_ordered(db, request_id, payload.ordered)


@router.put(
    "/{id}/keep",
    response_model=MessageResponse,
    responses={400: _bad_request, 404: _not_found, 500: _server_error},
    summary="Mark a request as a keep-on-hand item",
)
async def update_keep_on_hand(
    payload: KeepOnHandUpdate,
    request_id: int = Path(alias="id", ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await request_service.set_keep_on_hand(db, request_id, payload.keep_on_hand)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={400: _bad_request, 404: _not_found, 500: _server_error},
    summary="Delete a request",
)
async def delete_request(
    request_id: int = Path(alias="id", ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await request_service.delete(db, request_id)
