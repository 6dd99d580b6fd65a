# campusconnect/models/event.py
from typing import List, Optional

from pydantic import BaseModel, Field

from campusconnect.models.user import AuthorSnapshot


class Participant(BaseModel):
    userId: str
    name: str
    email: str
    registeredAt: str


class Event(BaseModel):
    id: str
    title: str
    description: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    venue: str
    category: str
    organizer: str
    maxParticipants: Optional[int] = None
    registrationRequired: bool = False
    image: Optional[str] = None
    author: AuthorSnapshot
    participants: List[Participant] = Field(default_factory=list)
    createdAt: str
    updatedAt: str
