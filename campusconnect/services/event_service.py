# campusconnect/services/event_service.py
"""
Event Service

Events carry an ordered participant list. Registration is a two-state machine
per user (unregistered / registered):

- register: registration required, event not started, seats left, user not
  yet a participant, user is a student
- unregister: user currently a participant, user is a student

``timeRemaining``, ``isUpcoming`` and ``isPast`` are derived from the wall
clock on every read and never written to the collection.
"""
import logging
from typing import Optional

from campusconnect.core.exceptions import AuthorizationError, ConflictError, StorageError
from campusconnect.models.event import Event, Participant
from campusconnect.schemas.event import EventCreate, EventUpdate
from campusconnect.services.base import (
    ResourceService,
    author_snapshot,
    changes_from,
    contains,
    invalid,
    new_id,
    paginate,
    validate_payload,
)
from campusconnect.utils.permissions import Role, is_owner_or_admin, require_roles
from campusconnect.utils.timeutils import event_start
from campusconnect.utils.uploads import discard_on_error, remove_file, save_upload

logger = logging.getLogger(__name__)


class EventService(ResourceService):
    collection = "events"
    label = "Event"
    upload_kind = "events"

    def start_of(self, event: dict):
        return event_start(event.get("date"), event.get("time"), self.settings.TIMEZONE)

    def with_timing(self, event: dict) -> dict:
        start = self.start_of(event)
        remaining_ms = int((start - self.now()).total_seconds() * 1000) if start else 0
        return {
            **event,
            "timeRemaining": remaining_ms if remaining_ms > 0 else None,
            "isUpcoming": remaining_ms > 0,
            "isPast": remaining_ms <= 0,
        }

    def _check_future(self, date_value, time_value):
        start = event_start(date_value, time_value, self.settings.TIMEZONE)
        if start is None or start <= self.now():
            raise invalid("date", "Event date must be in the future")

    def list(self, user, category: Optional[str] = None, upcoming: bool = False,
             search: Optional[str] = None, page: int = 1, limit: Optional[int] = None):
        events = self.load()

        if category:
            events = [e for e in events if e.get("category") == category]
        if upcoming:
            now = self.now()
            events = [e for e in events if (self.start_of(e) or now) > now]
        if search:
            events = [
                e for e in events
                if contains(e.get("title"), search)
                or contains(e.get("description"), search)
                or contains(e.get("venue"), search)
            ]

        # 가까운 일정 순
        events.sort(key=lambda e: (self.start_of(e) is None, self.start_of(e) or self.now()))
        items, pagination = paginate(events, page, limit or self.default_limit)
        return [self.with_timing(e) for e in items], pagination

    def get(self, event_id: str, user) -> dict:
        return self.with_timing(self.find(self.load(), event_id))

    def create(self, payload: dict, user, image=None) -> dict:
        require_roles(user, Role.FACULTY, Role.ADMIN)
        data = validate_payload(EventCreate, payload)
        self._check_future(data.date, data.time)

        stored = save_upload(image, self.upload_kind, self.settings) if image is not None else None

        timestamp = self.now_iso()
        event = Event(
            id=new_id(),
            title=data.title,
            description=data.description,
            date=data.date.isoformat(),
            time=data.time,
            venue=data.venue,
            category=data.category,
            organizer=data.organizer,
            maxParticipants=data.maxParticipants,
            registrationRequired=data.registrationRequired,
            image=stored.file_path if stored else None,
            author=author_snapshot(user),
            participants=[],
            createdAt=timestamp,
            updatedAt=timestamp,
        ).model_dump(mode="json")

        with discard_on_error(event["image"], self.settings):
            with self.store.mutate(self.collection) as events:
                events.append(event)

        logger.info(f"Event created: {event['id']} by {user['email']}")
        return self.with_timing(event)

    def update(self, event_id: str, payload: dict, user, image=None) -> dict:
        data = validate_payload(EventUpdate, payload)
        changes = changes_from(data, nullable=("maxParticipants",))
        new_image = None

        try:
            with self.store.mutate(self.collection) as events:
                event = self.find(events, event_id)
                if not is_owner_or_admin(user, event):
                    raise AuthorizationError("Access denied. You can only update your own events.")

                if "date" in changes or "time" in changes:
                    self._check_future(changes.get("date", event.get("date")), changes.get("time", event.get("time")))

                registered = len(event.get("participants", []))
                new_limit = changes.get("maxParticipants")
                if new_limit is not None and new_limit < registered:
                    raise invalid("maxParticipants",
                                  f"maxParticipants cannot be less than the {registered} registered participants")

                old_image = event.get("image")
                if image is not None:
                    new_image = save_upload(image, self.upload_kind, self.settings).file_path
                    changes["image"] = new_image

                # id, author, participants, createdAt 은 유지
                event.update(changes)
                event["updatedAt"] = self.now_iso()
        except StorageError:
            # 기록 저장 실패 시 새로 올린 이미지 정리
            remove_file(new_image, self.settings)
            raise

        if new_image and old_image:
            remove_file(old_image, self.settings)

        logger.info(f"Event updated: {event_id} by {user['email']}")
        return self.with_timing(event)

    def delete(self, event_id: str, user) -> None:
        with self.store.mutate(self.collection) as events:
            index = self.index_of(events, event_id)
            if not is_owner_or_admin(user, events[index]):
                raise AuthorizationError("Access denied. You can only delete your own events.")
            event = events.pop(index)

        if event.get("image"):
            remove_file(event["image"], self.settings)
        logger.info(f"Event deleted: {event_id} by {user['email']}")

    def register(self, event_id: str, user) -> dict:
        require_roles(user, Role.STUDENT)

        with self.store.mutate(self.collection) as events:
            event = self.find(events, event_id)

            if not event.get("registrationRequired"):
                raise invalid("registrationRequired", "This event does not require registration")

            start = self.start_of(event)
            if start is None or start <= self.now():
                raise invalid("date", "Cannot register for past events")

            participants = event.setdefault("participants", [])
            if any(p.get("userId") == user["id"] for p in participants):
                raise ConflictError("You are already registered for this event")

            max_participants = event.get("maxParticipants")
            if max_participants and len(participants) >= max_participants:
                raise ConflictError("Event is full")

            participants.append(Participant(
                userId=user["id"],
                name=user["name"],
                email=user["email"],
                registeredAt=self.now_iso(),
            ).model_dump())
            event["updatedAt"] = self.now_iso()

        logger.info(f"User {user['email']} registered for event {event_id}")
        return self.with_timing(event)

    def unregister(self, event_id: str, user) -> dict:
        require_roles(user, Role.STUDENT)

        with self.store.mutate(self.collection) as events:
            event = self.find(events, event_id)
            participants = event.get("participants", [])
            remaining = [p for p in participants if p.get("userId") != user["id"]]
            if len(remaining) == len(participants):
                raise ConflictError("You are not registered for this event")

            event["participants"] = remaining
            event["updatedAt"] = self.now_iso()

        logger.info(f"User {user['email']} unregistered from event {event_id}")
        return self.with_timing(event)
