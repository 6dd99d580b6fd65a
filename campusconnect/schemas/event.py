import datetime as dt
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _blank_to_none(v):
    # 폼에서 빈 값이 오면 인원 제한 없음
    if isinstance(v, str) and not v.strip():
        return None
    return v


EventTitle = Annotated[str, Field(min_length=5, max_length=200)]
EventDescription = Annotated[str, Field(min_length=10, max_length=1000)]
EventTime = Annotated[str, Field(pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")]
Venue = Annotated[str, Field(min_length=3, max_length=100)]
EventCategory = Literal["academic", "cultural", "sports", "workshop", "seminar"]
Organizer = Annotated[str, Field(min_length=2, max_length=100)]
MaxParticipants = Annotated[Optional[Annotated[int, Field(ge=1)]], BeforeValidator(_blank_to_none)]


class EventCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: EventTitle
    description: EventDescription
    date: dt.date
    time: EventTime
    venue: Venue
    category: EventCategory
    organizer: Organizer
    maxParticipants: MaxParticipants = None
    registrationRequired: bool = False


class EventUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[EventTitle] = None
    description: Optional[EventDescription] = None
    date: Optional[dt.date] = None
    time: Optional[EventTime] = None
    venue: Optional[Venue] = None
    category: Optional[EventCategory] = None
    organizer: Optional[Organizer] = None
    maxParticipants: MaxParticipants = None
    registrationRequired: Optional[bool] = None
