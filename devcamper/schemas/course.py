"""
DevCamper API — Course Request/Response Schemas
================================================
"""

import uuid
from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import BeforeValidator, Field

from devcamper.models.course import SKILL_LEVELS
from devcamper.schemas.common import (
    BootcampSummary,
    CleanStr,
    RequestSchema,
    ResponseSchema,
    public_field_map,
)

SkillLevel = Literal[SKILL_LEVELS]


def _weeks_to_str(value: Any) -> Any:
    # Clients send weeks as either 8 or "8"
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


Weeks = Annotated[CleanStr, BeforeValidator(_weeks_to_str)]


class CourseCreate(RequestSchema):
    title: CleanStr = Field(min_length=1, max_length=100)
    description: CleanStr = Field(min_length=1)
    weeks: Weeks = Field(min_length=1, max_length=20)
    tuition: int = Field(ge=0)
    minimum_skill: SkillLevel
    scholarship_available: bool = False


class CourseUpdate(RequestSchema):
    title: Optional[CleanStr] = Field(default=None, min_length=1, max_length=100)
    description: Optional[CleanStr] = Field(default=None, min_length=1)
    weeks: Optional[Weeks] = Field(default=None, min_length=1, max_length=20)
    tuition: Optional[int] = Field(default=None, ge=0)
    minimum_skill: Optional[SkillLevel] = None
    scholarship_available: Optional[bool] = None


class CourseResponse(ResponseSchema):
    id: uuid.UUID
    title: str
    description: str
    weeks: str
    tuition: int
    minimum_skill: str
    scholarship_available: bool
    bootcamp_id: uuid.UUID = Field(serialization_alias="bootcamp")
    user_id: uuid.UUID = Field(serialization_alias="user")
    created_at: datetime
    updated_at: datetime


class CourseWithBootcamp(CourseResponse):
    """Course with its bootcamp expanded to `{id, name, description}`."""

    bootcamp_id: uuid.UUID = Field(exclude=True)
    bootcamp: BootcampSummary


COURSE_FIELDS = public_field_map(CourseResponse)
