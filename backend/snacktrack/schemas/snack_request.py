"""
SnackTrack Backend - Snack Request Schemas
===========================================

What:  Pydantic models for the /api/requests routes.

Response rows mirror the `snack_requests` columns one to one, flags as the
stored 0/1 integers and timestamps as ISO 8601 strings.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from snacktrack.models.snack_request import MAX_ID


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SnackRequestCreate(BaseModel):
    """
    Body of POST /api/requests.

    Only `user_id` is required; the item fields may be blank or omitted.
    The user id is not checked against `users` before the insert.
    """
    user_id: int = Field(ge=1, le=MAX_ID, description="Id of the requesting user")
    snack: Optional[str] = None
    drink: Optional[str] = None
    misc: Optional[str] = None
    link: Optional[str] = None


class OrderedUpdate(BaseModel):
    """Body of PUT /api/requests/{id}/order."""
    ordered: bool


class KeepOnHandUpdate(BaseModel):
    """Body of PUT /api/requests/{id}/keep."""
    keep_on_hand: bool


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SnackRequestResponse(BaseModel):
    """One `snack_requests` row."""
    id: int
    user_id: Optional[int] = None
    snack: Optional[str] = None
    drink: Optional[str] = None
    misc: Optional[str] = None
    link: Optional[str] = None
    ordered_flag: int = 0
    created_at: Optional[datetime] = None
    ordered_at: Optional[datetime] = None
    keep_on_hand: int = 0

    model_config = {"from_attributes": True}


class SnackRequestWithUserResponse(SnackRequestResponse):
    """A `snack_requests` row joined with the requester's display name."""
    user_name: Optional[str] = None
