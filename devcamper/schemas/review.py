"""
DevCamper API — Review Request/Response Schemas
================================================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from devcamper.schemas.common import (
    BootcampSummary,
    CleanStr,
    RequestSchema,
    ResponseSchema,
    public_field_map,
)


class ReviewCreate(RequestSchema):
    title: CleanStr = Field(min_length=1, max_length=100)
    text: CleanStr = Field(min_length=1, max_length=500)
    rating: int = Field(ge=1, le=10)


class ReviewUpdate(RequestSchema):
    title: Optional[CleanStr] = Field(default=None, min_length=1, max_length=100)
    text: Optional[CleanStr] = Field(default=None, min_length=1, max_length=500)
    rating: Optional[int] = Field(default=None, ge=1, le=10)


class ReviewResponse(ResponseSchema):
    id: uuid.UUID
    title: str
    text: str
    rating: int
    bootcamp_id: uuid.UUID = Field(serialization_alias="bootcamp")
    user_id: uuid.UUID = Field(serialization_alias="user")
    created_at: datetime
    updated_at: datetime


class ReviewWithBootcamp(ReviewResponse):
    bootcamp_id: uuid.UUID = Field(exclude=True)
    bootcamp: BootcampSummary


REVIEW_FIELDS = public_field_map(ReviewResponse)
