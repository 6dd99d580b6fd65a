import os
from datetime import date, timedelta

import pytest

from campusconnect.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from campusconnect.services.event_service import EventService
from campusconnect.utils.uploads import resolve_path


@pytest.fixture
def events(store, settings):
    return EventService(store, settings)


@pytest.fixture
def event_payload(future_date):
    def _payload(**overrides):
        payload = {
            "title": "Robotics workshop",
            "description": "Hands-on session building line followers.",
            "date": future_date,
            "time": "14:30",
            "venue": "Lab 204",
            "category": "workshop",
            "organizer": "Robotics Club",
            "registrationRequired": True,
        }
        payload.update(overrides)
        return payload
    return _payload


def move_to_past(store, event_id):
    with store.mutate("events") as records:
        for record in records:
            if record["id"] == event_id:
                record["date"] = (date.today() - timedelta(days=2)).isoformat()


def test_student_cannot_create_event(events, student, event_payload):
    with pytest.raises(AuthorizationError):
        events.create(event_payload(), student)


def test_event_date_must_be_in_future(events, faculty, event_payload):
    with pytest.raises(ValidationError):
        events.create(event_payload(date=(date.today() - timedelta(days=1)).isoformat()), faculty)


def test_invalid_time_rejected(events, faculty, event_payload):
    with pytest.raises(ValidationError):
        events.create(event_payload(time="25:00"), faculty)


def test_derived_timing_fields_are_not_stored(events, store, faculty, event_payload):
    event = events.create(event_payload(), faculty)
    assert event["isUpcoming"] is True
    assert event["isPast"] is False
    assert event["timeRemaining"] > 0

    stored = store.load_all("events")[0]
    for key in ("timeRemaining", "isUpcoming", "isPast"):
        assert key not in stored


def test_register_and_unregister(events, faculty, student, event_payload):
    event = events.create(event_payload(), faculty)

    registered = events.register(event["id"], student)
    assert [p["userId"] for p in registered["participants"]] == [student["id"]]
    assert registered["participants"][0]["email"] == student["email"]

    with pytest.raises(ConflictError):
        events.register(event["id"], student)

    unregistered = events.unregister(event["id"], student)
    assert unregistered["participants"] == []

    with pytest.raises(ConflictError):
        events.unregister(event["id"], student)

    # 다시 등록 가능
    assert len(events.register(event["id"], student)["participants"]) == 1


def test_register_full_event(events, faculty, make_user, event_payload):
    event = events.create(event_payload(maxParticipants=1), faculty)
    events.register(event["id"], make_user("student"))

    with pytest.raises(ConflictError):
        events.register(event["id"], make_user("student"))


def test_register_requires_registration_flag(events, faculty, student, event_payload):
    event = events.create(event_payload(registrationRequired=False), faculty)
    with pytest.raises(ValidationError):
        events.register(event["id"], student)


def test_register_past_event(events, store, faculty, student, event_payload):
    event = events.create(event_payload(), faculty)
    move_to_past(store, event["id"])
    with pytest.raises(ValidationError):
        events.register(event["id"], student)


def test_only_students_register(events, faculty, event_payload):
    event = events.create(event_payload(), faculty)
    with pytest.raises(AuthorizationError):
        events.register(event["id"], faculty)


def test_register_unknown_event(events, student):
    with pytest.raises(NotFoundError):
        events.register("missing", student)


def test_upcoming_filter_and_soonest_first(events, store, faculty, student, event_payload):
    later = events.create(event_payload(title="Later event", date=(date.today() + timedelta(days=60)).isoformat()), faculty)
    sooner = events.create(event_payload(title="Sooner event", date=(date.today() + timedelta(days=5)).isoformat()), faculty)
    past = events.create(event_payload(title="Past event"), faculty)
    move_to_past(store, past["id"])

    items, _ = events.list(student)
    assert [e["id"] for e in items] == [past["id"], sooner["id"], later["id"]]
    assert items[0]["isPast"] is True and items[0]["timeRemaining"] is None

    items, pagination = events.list(student, upcoming=True)
    assert [e["id"] for e in items] == [sooner["id"], later["id"]]
    assert pagination["total"] == 2


def test_update_preserves_participants(events, faculty, student, event_payload):
    event = events.create(event_payload(), faculty)
    events.register(event["id"], student)

    updated = events.update(event["id"], {"venue": "Main Auditorium", "participants": []}, faculty)
    assert updated["venue"] == "Main Auditorium"
    assert len(updated["participants"]) == 1
    assert updated["author"] == event["author"]


def test_update_cannot_drop_limit_below_participants(events, store, faculty, make_user, event_payload):
    event = events.create(event_payload(maxParticipants=5), faculty)
    for _ in range(3):
        events.register(event["id"], make_user("student"))

    with pytest.raises(ValidationError) as exc:
        events.update(event["id"], {"maxParticipants": 1}, faculty)
    assert exc.value.errors[0]["field"] == "maxParticipants"
    assert store.load_all("events")[0]["maxParticipants"] == 5

    assert events.update(event["id"], {"maxParticipants": 3}, faculty)["maxParticipants"] == 3
    assert events.update(event["id"], {"maxParticipants": None}, faculty)["maxParticipants"] is None


def test_failed_save_discards_new_image(events, store, settings, faculty, event_payload, upload, monkeypatch):
    event = events.create(event_payload(), faculty, image=upload("poster.png"))

    def broken_save(collection, records):
        raise StorageError(f"Could not save {collection}")

    monkeypatch.setattr(store, "save_all", broken_save)
    with pytest.raises(StorageError):
        events.update(event["id"], {}, faculty, image=upload("new.png"))
    with pytest.raises(StorageError):
        events.create(event_payload(), faculty, image=upload("other.png"))

    # 기존 이미지만 남음
    assert os.listdir(os.path.join(settings.UPLOAD_DIR, "events")) == [event["image"].rsplit("/", 1)[1]]


def test_update_by_student_forbidden(events, faculty, student, event_payload):
    event = events.create(event_payload(), faculty)
    with pytest.raises(AuthorizationError):
        events.update(event["id"], {"venue": "Elsewhere"}, student)


def test_new_image_replaces_old_file(events, settings, faculty, event_payload, upload):
    event = events.create(event_payload(), faculty, image=upload("poster.png", b"png-1"))
    old_path = resolve_path(event["image"], settings)
    assert event["image"].startswith("/uploads/events/")

    updated = events.update(event["id"], {}, faculty, image=upload("poster2.jpg", b"jpg-2"))
    assert updated["image"] != event["image"]
    assert not os.path.exists(old_path)

    events.delete(event["id"], faculty)
    assert not os.path.exists(resolve_path(updated["image"], settings))


def test_event_image_type_checked(events, faculty, event_payload, upload):
    with pytest.raises(ValidationError):
        events.create(event_payload(), faculty, image=upload("poster.gif"))
