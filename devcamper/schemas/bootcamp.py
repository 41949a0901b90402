"""
DevCamper API — Bootcamp Request/Response Schemas
==================================================

What:  Validation for bootcamp create/update bodies and the serialized
       bootcamp shape (with and without its courses).
Why:   The client sends a free-form `address`; the API answers with the
       geocoded `location` object. Keeping both directions here makes that
       asymmetry explicit.

Field names on the wire are camelCase (`jobAssistance`, `averageCost`);
`user` carries the owner's id.
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from devcamper.models.bootcamp import CAREERS
from devcamper.schemas.common import CleanStr, RequestSchema, ResponseSchema, public_field_map
from devcamper.schemas.course import CourseResponse

Career = Literal[CAREERS]

# http(s) URL with a dotted host; markup is rejected by the pattern itself
WEBSITE_PATTERN = (
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)


class BootcampCreate(RequestSchema):
    name: CleanStr = Field(min_length=1, max_length=50)
    description: CleanStr = Field(min_length=1, max_length=500)
    website: Optional[str] = Field(default=None, pattern=WEBSITE_PATTERN)
    phone: Optional[CleanStr] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: CleanStr = Field(min_length=1, description="Free-form address, geocoded into `location`")
    careers: List[Career] = Field(min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class BootcampUpdate(RequestSchema):
    name: Optional[CleanStr] = Field(default=None, min_length=1, max_length=50)
    description: Optional[CleanStr] = Field(default=None, min_length=1, max_length=500)
    website: Optional[str] = Field(default=None, pattern=WEBSITE_PATTERN)
    phone: Optional[CleanStr] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[CleanStr] = Field(default=None, min_length=1)
    careers: Optional[List[Career]] = Field(default=None, min_length=1)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None


class LocationResponse(ResponseSchema):
    type: str = "Point"
    coordinates: List[float]
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class BootcampResponse(ResponseSchema):
    id: uuid.UUID
    name: str
    slug: str
    description: str
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[LocationResponse] = None
    careers: List[str]
    average_rating: Optional[float] = None
    average_cost: Optional[int] = None
    photo: str
    housing: bool
    job_assistance: bool
    job_guarantee: bool
    accept_gi: bool
    user_id: uuid.UUID = Field(serialization_alias="user")
    created_at: datetime
    updated_at: datetime


class BootcampWithCourses(BootcampResponse):
    courses: List[CourseResponse] = Field(default_factory=list)


# Dotted names address the flattened location columns
BOOTCAMP_FIELDS = public_field_map(
    BootcampResponse,
    extra={
        "location.formattedAddress": "formatted_address",
        "location.street": "street",
        "location.city": "city",
        "location.state": "state",
        "location.zipcode": "zipcode",
        "location.country": "country",
    },
)
